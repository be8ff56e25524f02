import logging
import shutil
import os
import stat
import threading
from uuid import UUID

from host_claim.proof import PROOF_FILENAME, ProofTokenStore, parse_proof_candidate


def _read(path: str) -> str:
    with open(path, encoding="ascii") as fh:
        return fh.read()


def test_generate_persists_canonical_token_with_newline(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    assert store.generate() is True

    path = store.current_path()
    assert path == os.path.join(str(tmp_path), PROOF_FILENAME)
    content = _read(path)
    assert content.endswith("\n")
    key = content.strip()
    assert key == str(UUID(key))
    assert key == key.lower()
    assert store.matches(key) is True

    mode = stat.S_IMODE(os.stat(path).st_mode)
    assert mode & 0o007 == 0
    assert mode & 0o022 == 0


def test_current_path_generates_on_first_use(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    path = store.current_path()
    assert path is not None
    assert store.matches(_read(path).strip()) is True


def test_no_live_token_never_matches(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    assert store.matches("00000000-0000-0000-0000-000000000000") is False
    assert store.matches("6f1c2c8e-6a1b-4f43-9a4f-6a7f4f6e2d10") is False


def test_malformed_candidates_fail_closed(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    key = _read(store.current_path()).strip()

    candidates = [
        "",
        "not-a-uuid",
        key.upper(),
        key.replace("-", ""),
        "{" + key + "}",
        "urn:uuid:" + key,
        key + "\n",
        " " + key,
        key[:-1],
        None,
        12345,
        key.encode("ascii"),
    ]
    for candidate in candidates:
        assert store.matches(candidate) is False
    assert store.matches(key) is True


def test_parse_proof_candidate() -> None:
    assert parse_proof_candidate("6f1c2c8e-6a1b-4f43-9a4f-6a7f4f6e2d10") == UUID("6f1c2c8e-6a1b-4f43-9a4f-6a7f4f6e2d10")
    assert parse_proof_candidate("6F1C2C8E-6A1B-4F43-9A4F-6A7F4F6E2D10") is None
    assert parse_proof_candidate("zzzzzzzz-6a1b-4f43-9a4f-6a7f4f6e2d10") is None


def test_generate_supersedes_previous_token(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    first = _read(store.current_path()).strip()
    store.generate()
    second = _read(store.current_path()).strip()

    assert first != second
    assert store.matches(first) is False
    assert store.matches(second) is True


def test_rotating_rotates_on_every_exit_path(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    key = _read(store.current_path()).strip()

    with store.rotating():
        assert store.matches(key) is True
    assert store.matches(key) is False

    key = _read(store.current_path()).strip()
    try:
        with store.rotating():
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert store.matches(key) is False


def test_write_failure_is_logged_and_token_stays_live(tmp_path, monkeypatch, caplog) -> None:
    fixed = UUID("6f1c2c8e-6a1b-4f43-9a4f-6a7f4f6e2d10")
    monkeypatch.setattr("host_claim.proof.store.uuid4", lambda: fixed)
    store = ProofTokenStore(str(tmp_path / "missing"))

    with caplog.at_level(logging.ERROR, logger="host_claim.proof.store"):
        assert store.generate() is False
    assert "Cannot create proof file" in caplog.text

    assert store.matches(str(fixed)) is True
    assert store.current_path() is None


def test_concurrent_authentication_succeeds_once(tmp_path) -> None:
    store = ProofTokenStore(str(tmp_path))
    key = _read(store.current_path()).strip()
    results: list[bool] = []
    barrier = threading.Barrier(8)

    def attempt() -> None:
        barrier.wait()
        with store.rotating():
            results.append(store.matches(key))

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert len(results) == 8


def test_failed_rewrite_forgets_previous_path(tmp_path) -> None:
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    store = ProofTokenStore(str(state_dir))
    assert store.current_path() is not None

    shutil.rmtree(state_dir)
    assert store.generate() is False
    assert store.current_path() is None
