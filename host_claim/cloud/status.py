"""Cloud status evaluation and its report projection."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .collaborators import CloudConnector, CloudSnapshot

BANNED_REASON = "Agent is banned from the cloud"


class CloudStatus(str, Enum):
    """Claim/connectivity relationship between this host and the remote service."""

    AVAILABLE = "available"
    OFFLINE = "offline"
    INDIRECT = "indirect"
    ONLINE = "online"
    BANNED = "banned"

    @property
    def can_be_claimed(self) -> bool:
        return self in _CLAIMABLE


_CLAIMABLE = frozenset({CloudStatus.AVAILABLE, CloudStatus.OFFLINE, CloudStatus.INDIRECT})


def status_from_snapshot(snapshot: CloudSnapshot) -> CloudStatus:
    if snapshot.banned:
        return CloudStatus.BANNED
    if not snapshot.claimed:
        return CloudStatus.AVAILABLE
    if snapshot.online:
        return CloudStatus.ONLINE
    if snapshot.indirect:
        return CloudStatus.INDIRECT
    return CloudStatus.OFFLINE


class CloudStatusEvaluator:
    """Maps connector state to a :class:`CloudStatus` without mutating anything."""

    def __init__(self, connector: CloudConnector) -> None:
        self.connector = connector

    def compute(self, now: int) -> tuple[CloudStatus, bool]:
        _ = now
        status = status_from_snapshot(self.connector.snapshot())
        return status, status.can_be_claimed

    def describe(self, now: int) -> tuple[CloudStatus, dict[str, Any]]:
        """Return the status and the ``cloud`` member of the claim report."""
        snap = self.connector.snapshot()
        status = status_from_snapshot(snap)
        cloud: dict[str, Any] = {
            "id": snap.connection_id,
            "status": status.value,
            "since": snap.last_change,
            "age": now - snap.last_change if snap.last_change else 0,
        }

        if status == CloudStatus.AVAILABLE:
            cloud["url"] = snap.url
            cloud["reason"] = snap.last_claim_failure
        elif status == CloudStatus.BANNED:
            cloud["claim_id"] = snap.claim_id
            cloud["url"] = snap.url
            cloud["reason"] = BANNED_REASON
        elif status == CloudStatus.OFFLINE:
            cloud["claim_id"] = snap.claim_id
            cloud["url"] = snap.url
            cloud["reason"] = snap.offline_reason
            if snap.next_connect > now:
                cloud["next_check"] = snap.next_connect
                cloud["next_in"] = snap.next_connect - now
        elif status == CloudStatus.ONLINE:
            cloud["claim_id"] = snap.claim_id
            cloud["url"] = snap.url
            cloud["reason"] = ""
        else:
            cloud["claim_id"] = snap.claim_id
            cloud["url"] = snap.url

        return status, cloud
