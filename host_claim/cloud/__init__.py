"""Cloud claim/connectivity status."""

from .collaborators import ClaimAgent, CloudConnector, CloudSnapshot
from .status import CloudStatus, CloudStatusEvaluator, status_from_snapshot

__all__ = [
    "ClaimAgent",
    "CloudConnector",
    "CloudSnapshot",
    "CloudStatus",
    "CloudStatusEvaluator",
    "status_from_snapshot",
]
