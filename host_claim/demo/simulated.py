"""In-memory remote service used by the demo and tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional
from uuid import uuid4

from ..cloud.collaborators import ClaimAgent, CloudConnector, CloudSnapshot
from ..cloud.status import CloudStatus, status_from_snapshot
from ..utils.time import epoch_seconds

DEFAULT_URL = "https://cloud.example"


@dataclass
class SimulatedCloud(ClaimAgent, CloudConnector):
    """Accepts claims for a fixed set of tokens and goes online after reload."""

    accepted_tokens: set[str] = field(default_factory=lambda: {"abc"})
    reachable: bool = True
    online_after_reload: bool = True
    state: CloudSnapshot = field(default_factory=lambda: CloudSnapshot(url=DEFAULT_URL))
    claims: list[dict] = field(default_factory=list)
    reloads: int = 0
    _failure: str = ""

    async def claim(self, base_url: str, token: str, rooms: Optional[str], proxy: str, insecure: bool) -> bool:
        self.claims.append({"base_url": base_url, "rooms": rooms, "proxy": proxy, "insecure": insecure})
        if not self.reachable:
            return self._fail("network unreachable")
        if token not in self.accepted_tokens:
            return self._fail("the remote service rejected the claim token")

        self._failure = ""
        self.state = replace(
            self.state,
            claimed=True,
            claim_id=str(uuid4()),
            url=base_url,
            last_claim_failure="",
            last_change=epoch_seconds(),
        )
        return True

    def failure_reason(self) -> str:
        return self._failure

    def snapshot(self) -> CloudSnapshot:
        return self.state

    async def reload_and_wait_online(self) -> CloudStatus:
        self.reloads += 1
        online = self.state.claimed and self.online_after_reload
        self.state = replace(
            self.state,
            online=online,
            connection_id=self.state.connection_id + (1 if online else 0),
            offline_reason="" if online else "connection refused",
            last_change=epoch_seconds(),
        )
        return status_from_snapshot(self.state)

    def _fail(self, reason: str) -> bool:
        self._failure = reason
        self.state = replace(self.state, last_claim_failure=reason)
        return False
