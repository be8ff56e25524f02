"""Claim parameter extraction and validation."""

from .request import ClaimCredentials, ClaimParameters, InvalidClaimParameters
from .validator import is_valid

__all__ = ["ClaimParameters", "ClaimCredentials", "InvalidClaimParameters", "is_valid"]
