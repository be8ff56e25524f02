"""File-backed single-use proof token for out-of-band host ownership checks."""

from __future__ import annotations

import hmac
import logging
import os
import re
import threading
from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import UUID, uuid4

from .types import NULL_UUID, ProofToken

PROOF_FILENAME = "claim_proof_id"
PROOF_FILE_MODE = 0o640

_UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")

logger = logging.getLogger(__name__)


def parse_proof_candidate(candidate: object) -> Optional[UUID]:
    """Parse a canonical (lowercase, hyphenated) UUID string, returning None for anything else."""
    if not isinstance(candidate, str) or not _UUID_RE.fullmatch(candidate):
        return None
    try:
        return UUID(candidate)
    except ValueError:
        return None


class ProofTokenStore:
    """Owns the live proof token and its on-disk copy.

    Only one token is live at a time. ``generate()`` replaces it in memory
    before attempting the file write, so a failed write never leaves an older
    value matchable.
    """

    def __init__(self, state_dir: str, *, filename: str = PROOF_FILENAME) -> None:
        self._target = os.path.join(state_dir, filename)
        self._lock = threading.RLock()
        self._token = ProofToken(value=NULL_UUID)

    @property
    def target_path(self) -> str:
        return self._target

    def generate(self) -> bool:
        """Rotate the live token and persist it. Returns False if the write failed."""
        with self._lock:
            self._token = ProofToken(value=uuid4())
            written = self._write(self._token.canonical)
            if written:
                self._token = ProofToken(value=self._token.value, backing_path=self._target)
            return written

    def current_path(self) -> Optional[str]:
        """Return the persisted token path, generating a token while none is on disk."""
        with self._lock:
            if self._token.backing_path is None:
                self.generate()
            return self._token.backing_path

    def matches(self, candidate: object) -> bool:
        """Compare ``candidate`` against the live token. Never raises."""
        parsed = parse_proof_candidate(candidate)
        if parsed is None:
            return False
        with self._lock:
            if self._token.is_null:
                return False
            return hmac.compare_digest(self._token.value.bytes, parsed.bytes)

    @contextmanager
    def rotating(self) -> Iterator["ProofTokenStore"]:
        """Hold the token lock for a compare step and rotate on every exit path."""
        with self._lock:
            try:
                yield self
            finally:
                self.generate()

    def _write(self, canonical: str) -> bool:
        try:
            os.unlink(self._target)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Cannot remove previous proof file '%s': %s", self._target, exc)

        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_CLOEXEC", 0)
        try:
            fd = os.open(self._target, flags, PROOF_FILE_MODE)
        except OSError as exc:
            logger.error("Cannot create proof file '%s': %s", self._target, exc)
            return False

        try:
            with os.fdopen(fd, "w", encoding="ascii") as fh:
                fh.write(canonical + "\n")
        except OSError as exc:
            logger.error("Cannot write proof file '%s': %s", self._target, exc)
            return False
        return True
