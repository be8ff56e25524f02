"""Single-use proof token generation and verification."""

from .store import PROOF_FILENAME, ProofTokenStore, parse_proof_candidate
from .types import ProofToken

__all__ = ["ProofTokenStore", "ProofToken", "PROOF_FILENAME", "parse_proof_candidate"]
