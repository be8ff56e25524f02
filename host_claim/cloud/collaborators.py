"""Interfaces to the claiming and connectivity subsystems this package drives."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .status import CloudStatus


@dataclass(frozen=True)
class CloudSnapshot:
    """Point-in-time view of claim and connectivity state.

    ``last_change`` and ``next_connect`` are Unix seconds; zero means unknown.
    """

    claimed: bool = False
    banned: bool = False
    online: bool = False
    indirect: bool = False
    claim_id: Optional[str] = None
    url: str = ""
    connection_id: int = 0
    last_change: int = 0
    next_connect: int = 0
    offline_reason: str = ""
    last_claim_failure: str = ""


class ClaimAgent(ABC):
    """Registers this host with the remote service."""

    @abstractmethod
    async def claim(
        self,
        base_url: str,
        token: str,
        rooms: Optional[str],
        proxy: str,
        insecure: bool,
    ) -> bool:
        """Perform the claim call. Returns True when the remote side accepted it."""

    @abstractmethod
    def failure_reason(self) -> str:
        """Reason for the most recent failed :meth:`claim` call."""


class CloudConnector(ABC):
    """Live connectivity state and the post-claim reconnect trigger."""

    @abstractmethod
    def snapshot(self) -> CloudSnapshot:
        """Return current claim/connectivity state."""

    @abstractmethod
    async def reload_and_wait_online(self) -> "CloudStatus":
        """Reload claim state, reconnect, and return the resulting status."""
