"""Claim report rendering with platform-specific verification instructions."""

from __future__ import annotations

import logging
import re
import socket
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_FORBIDDEN = 403

INVALID_KEY = "invalid key"
INVALID_PARAMETERS = "invalid parameters"

logger = logging.getLogger(__name__)

_DRIVE_RE = re.compile(r"^/(?:cygdrive/)?([a-zA-Z])(?:/|$)")


def to_windows_path(path: str) -> str:
    """Translate a POSIX-style path (``/cygdrive/c/x`` or ``/c/x``) to ``C:\\x``."""
    match = _DRIVE_RE.match(path)
    if match:
        rest = path[match.end():]
        return f"{match.group(1).upper()}:\\" + rest.replace("/", "\\")
    return path.replace("/", "\\")


@dataclass(frozen=True)
class PlatformInstructions:
    """How an operator displays the proof file on one host platform."""

    prefix: str
    translate: Callable[[str], str]
    help: str

    def command(self, native_path: str) -> str:
        quote = '"' if " " in native_path else ""
        return f"{self.prefix} {quote}{native_path}{quote}"


INSTRUCTIONS: Dict[str, PlatformInstructions] = {
    "posix": PlatformInstructions(
        prefix="sudo cat",
        translate=lambda path: path,
        help=(
            "We need to verify this server is yours. SSH to this server and run this command. "
            "It will give you a UUID. Copy and paste this UUID to this box:"
        ),
    ),
    "windows": PlatformInstructions(
        prefix="more",
        translate=to_windows_path,
        help=(
            "We need to verify this Windows server is yours. So, open a Command Prompt on this server "
            "to run the command. It will give you a UUID. Copy and paste this UUID to this box:"
        ),
    ),
}


@dataclass(frozen=True)
class ClaimOutcome:
    success: bool
    message: str


@dataclass
class ClaimReport:
    """Response for one claim request: an HTTP status plus a JSON or text body."""

    http_status: int
    body: Dict[str, Any] = field(default_factory=dict)
    text: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.text is not None


class ResponseBuilder:
    """Builds claim reports from status, outcome and proof file location."""

    def __init__(self, *, platform: str = "posix", version: str = "", hostname: Optional[str] = None) -> None:
        if platform not in INSTRUCTIONS:
            raise ValueError(f"No verification instructions for platform '{platform}'.")
        self.instructions = INSTRUCTIONS[platform]
        self.version = version
        self.hostname = hostname or socket.gethostname()

    def forbidden(self) -> ClaimReport:
        return ClaimReport(http_status=HTTP_FORBIDDEN, text=INVALID_KEY)

    def bad_request(self) -> ClaimReport:
        return ClaimReport(http_status=HTTP_BAD_REQUEST, text=INVALID_PARAMETERS)

    def build(
        self,
        *,
        cloud: Dict[str, Any],
        can_be_claimed: bool,
        now: int,
        outcome: Optional[ClaimOutcome] = None,
        proof_path: Optional[str] = None,
    ) -> ClaimReport:
        body: Dict[str, Any] = {"cloud": cloud, "can_be_claimed": can_be_claimed}

        if outcome is not None:
            body["success"] = outcome.success
            body["message"] = outcome.message or ""

        if can_be_claimed:
            if proof_path:
                native = self.instructions.translate(proof_path)
                body["key_filename"] = native
                body["cmd"] = self.instructions.command(native)
            else:
                logger.warning("Proof file is not available; claim instructions omit the command")
            body["help"] = self.instructions.help

        body["agent"] = {"hostname": self.hostname, "version": self.version, "now": now}
        return ClaimReport(http_status=HTTP_OK, body=body)
