import logging

import pytest

from host_claim.config import DEFAULT_STATE_DIR, ClaimConfig, configure_logging


def test_from_env_defaults(monkeypatch) -> None:
    for name in ["HOST_CLAIM_STATE_DIR", "HOST_CLAIM_PROXY", "HOST_CLAIM_INSECURE", "HOST_CLAIM_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOST_CLAIM_PLATFORM", "posix")

    config = ClaimConfig.from_env()
    assert config.state_dir == DEFAULT_STATE_DIR
    assert config.proxy == "env"
    assert config.insecure is False
    assert config.log_level == "INFO"


def test_from_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("HOST_CLAIM_STATE_DIR", "/tmp/hc")
    monkeypatch.setenv("HOST_CLAIM_PROXY", "none")
    monkeypatch.setenv("HOST_CLAIM_INSECURE", "yes")
    monkeypatch.setenv("HOST_CLAIM_PLATFORM", "windows")
    monkeypatch.setenv("HOST_CLAIM_LOG_LEVEL", "debug")

    config = ClaimConfig.from_env()
    assert config == ClaimConfig(state_dir="/tmp/hc", proxy="none", insecure=True, platform="windows", log_level="DEBUG")


def test_invalid_values_rejected(monkeypatch) -> None:
    monkeypatch.setenv("HOST_CLAIM_INSECURE", "maybe")
    with pytest.raises(ValueError):
        ClaimConfig.from_env()

    with pytest.raises(ValueError):
        ClaimConfig(platform="beos")


def test_configure_logging_sets_package_level() -> None:
    logger = configure_logging("WARNING")
    assert logger.name == "host_claim"
    assert logger.level == logging.WARNING
    configure_logging("INFO")
