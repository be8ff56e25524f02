"""Host claiming package.

Out-of-band proof of host ownership and the claim flow that links a host to a
remote management service.
"""

from ._version import __version__
from .api import build_orchestrator, create_app
from .claim import ClaimOrchestrator, ResponseBuilder
from .cloud import CloudStatus
from .config import ClaimConfig
from .params import ClaimParameters
from .proof import ProofTokenStore

__all__ = [
    "__version__",
    "create_app",
    "build_orchestrator",
    "ClaimOrchestrator",
    "ResponseBuilder",
    "CloudStatus",
    "ClaimConfig",
    "ClaimParameters",
    "ProofTokenStore",
]
