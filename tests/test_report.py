import pytest

from host_claim.claim.report import INSTRUCTIONS, ClaimOutcome, ResponseBuilder, to_windows_path


def test_posix_instructions() -> None:
    builder = ResponseBuilder(platform="posix", version="1.2.3", hostname="node-1")
    report = builder.build(cloud={"status": "available"}, can_be_claimed=True, now=10, proof_path="/var/lib/hc/claim_proof_id")

    assert report.http_status == 200
    assert report.is_text is False
    body = report.body
    assert body["can_be_claimed"] is True
    assert body["key_filename"] == "/var/lib/hc/claim_proof_id"
    assert body["cmd"] == "sudo cat /var/lib/hc/claim_proof_id"
    assert body["help"] == INSTRUCTIONS["posix"].help
    assert "success" not in body
    assert "message" not in body
    assert body["agent"] == {"hostname": "node-1", "version": "1.2.3", "now": 10}


def test_path_with_space_is_quoted() -> None:
    builder = ResponseBuilder(platform="posix", hostname="h")
    report = builder.build(cloud={}, can_be_claimed=True, now=0, proof_path="/opt/my state/claim_proof_id")
    assert report.body["cmd"] == 'sudo cat "/opt/my state/claim_proof_id"'


def test_windows_instructions_translate_path() -> None:
    builder = ResponseBuilder(platform="windows", hostname="h")
    report = builder.build(cloud={}, can_be_claimed=True, now=0, proof_path="/cygdrive/c/Program Files/hc/claim_proof_id")
    assert report.body["key_filename"] == "C:\\Program Files\\hc\\claim_proof_id"
    assert report.body["cmd"] == 'more "C:\\Program Files\\hc\\claim_proof_id"'
    assert "Windows" in report.body["help"]


def test_to_windows_path() -> None:
    assert to_windows_path("/c/data/x") == "C:\\data\\x"
    assert to_windows_path("/cygdrive/d/x") == "D:\\x"
    assert to_windows_path("var/lib/x") == "var\\lib\\x"


def test_not_claimable_omits_instructions_and_keeps_outcome() -> None:
    builder = ResponseBuilder(hostname="h")
    report = builder.build(
        cloud={"status": "online"},
        can_be_claimed=False,
        now=0,
        outcome=ClaimOutcome(success=True, message="ok"),
        proof_path="/x",
    )
    assert report.body["success"] is True
    assert report.body["message"] == "ok"
    for key in ("key_filename", "cmd", "help"):
        assert key not in report.body


def test_missing_proof_file_keeps_help_only() -> None:
    report = ResponseBuilder(hostname="h").build(cloud={}, can_be_claimed=True, now=0, proof_path=None)
    assert "key_filename" not in report.body
    assert "cmd" not in report.body
    assert report.body["help"]


def test_error_reports_are_plain_text() -> None:
    builder = ResponseBuilder(hostname="h")
    assert (builder.forbidden().http_status, builder.forbidden().text) == (403, "invalid key")
    assert (builder.bad_request().http_status, builder.bad_request().text) == (400, "invalid parameters")


def test_unknown_platform_rejected() -> None:
    with pytest.raises(ValueError):
        ResponseBuilder(platform="amiga")
