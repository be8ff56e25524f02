"""Storage adapters for the claim attempt audit trail."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

import asyncpg

from ..utils.time import utc_now

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS claim_attempts (
    attempt_id uuid PRIMARY KEY,
    outcome text NOT NULL,
    reason text NOT NULL,
    status_before text NOT NULL,
    status_after text,
    base_url text,
    rooms text,
    created_at timestamptz NOT NULL
)
"""

INSERT_SQL = """
INSERT INTO claim_attempts (attempt_id, outcome, reason, status_before, status_after, base_url, rooms, created_at)
VALUES ($1::uuid, $2, $3, $4, $5, $6, $7, $8)
"""


class LedgerError(RuntimeError):
    """Raised when an attempt could not be recorded."""


@dataclass(frozen=True)
class ClaimAttempt:
    """One authenticated-path claim attempt. Never carries the key or token."""

    outcome: str
    reason: str
    status_before: str
    status_after: Optional[str] = None
    base_url: Optional[str] = None
    rooms: Optional[str] = None
    attempt_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt_id": self.attempt_id,
            "outcome": self.outcome,
            "reason": self.reason,
            "status_before": self.status_before,
            "status_after": self.status_after,
            "base_url": self.base_url,
            "rooms": self.rooms,
            "created_at": self.created_at,
        }


class ClaimLedger(ABC):
    """Abstract store for claim attempts."""

    @abstractmethod
    async def record(self, attempt: ClaimAttempt) -> None:
        """Persist one attempt."""

    @abstractmethod
    async def recent(self, limit: int = 20) -> list[ClaimAttempt]:
        """Return the newest attempts first."""

    async def close(self) -> None:
        """Close backend resources if needed."""


class InMemoryLedger(ClaimLedger):
    """In-memory ledger fallback backend."""

    def __init__(self) -> None:
        self.attempts: list[ClaimAttempt] = []

    async def record(self, attempt: ClaimAttempt) -> None:
        self.attempts.append(attempt)

    async def recent(self, limit: int = 20) -> list[ClaimAttempt]:
        return list(reversed(self.attempts))[:limit]


class PostgresLedger(ClaimLedger):
    """Postgres-backed ledger using asyncpg."""

    def __init__(self, dsn: str, *, min_size: int = 1, max_size: int = 4) -> None:
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self.pool is None:
            self.pool = await asyncpg.create_pool(dsn=self.dsn, min_size=self.min_size, max_size=self.max_size)
            async with self.pool.acquire() as conn:
                await conn.execute(CREATE_TABLE_SQL)

    async def close(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None

    async def record(self, attempt: ClaimAttempt) -> None:
        try:
            await self.connect()
            assert self.pool is not None
            async with self.pool.acquire() as conn:
                await conn.execute(
                    INSERT_SQL,
                    attempt.attempt_id,
                    attempt.outcome,
                    attempt.reason,
                    attempt.status_before,
                    attempt.status_after,
                    attempt.base_url,
                    attempt.rooms,
                    attempt.created_at,
                )
        except (asyncpg.PostgresError, OSError) as exc:
            raise LedgerError(f"cannot record claim attempt {attempt.attempt_id}: {exc}") from exc

    async def recent(self, limit: int = 20) -> list[ClaimAttempt]:
        try:
            await self.connect()
            assert self.pool is not None
            async with self.pool.acquire() as conn:
                rows = await conn.fetch("SELECT * FROM claim_attempts ORDER BY created_at DESC LIMIT $1", limit)
        except (asyncpg.PostgresError, OSError) as exc:
            raise LedgerError(f"cannot read claim attempts: {exc}") from exc
        return [
            ClaimAttempt(
                attempt_id=str(row["attempt_id"]),
                outcome=row["outcome"],
                reason=row["reason"],
                status_before=row["status_before"],
                status_after=row["status_after"],
                base_url=row["base_url"],
                rooms=row["rooms"],
                created_at=row["created_at"],
            )
            for row in rows
        ]


def create_ledger_from_env() -> ClaimLedger:
    """Create Postgres ledger if env configured, otherwise in-memory."""
    dsn = os.getenv("HOST_CLAIM_PG_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        return PostgresLedger(dsn=dsn)
    return InMemoryLedger()
