"""Runtime configuration for the claiming endpoint."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

DEFAULT_STATE_DIR = "/var/lib/host-claim"
PLATFORMS = ("posix", "windows")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def detect_platform() -> str:
    """Return the instruction platform key for the running interpreter."""
    if sys.platform.startswith(("win", "cygwin", "msys")):
        return "windows"
    return "posix"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}.")


@dataclass(frozen=True)
class ClaimConfig:
    """Settings read by the claim flow.

    ``proxy`` and ``insecure`` are handed through to the claim call untouched.
    """

    state_dir: str = DEFAULT_STATE_DIR
    proxy: str = "env"
    insecure: bool = False
    platform: str = "posix"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.platform not in PLATFORMS:
            raise ValueError(f"Unknown platform '{self.platform}'. Expected one of: {', '.join(PLATFORMS)}.")

    @classmethod
    def from_env(cls) -> "ClaimConfig":
        return cls(
            state_dir=os.getenv("HOST_CLAIM_STATE_DIR", DEFAULT_STATE_DIR),
            proxy=os.getenv("HOST_CLAIM_PROXY", "env"),
            insecure=_env_bool("HOST_CLAIM_INSECURE", False),
            platform=os.getenv("HOST_CLAIM_PLATFORM") or detect_platform(),
            log_level=os.getenv("HOST_CLAIM_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Set the package logger level; handlers are left to the hosting process."""
    logger = logging.getLogger("host_claim")
    logger.setLevel(level)
    return logger
