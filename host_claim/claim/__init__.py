"""Claim orchestration, reporting, and attempt ledger."""

from .ledger import ClaimAttempt, ClaimLedger, InMemoryLedger, LedgerError, PostgresLedger, create_ledger_from_env
from .orchestrator import ClaimOrchestrator
from .report import ClaimOutcome, ClaimReport, PlatformInstructions, ResponseBuilder

__all__ = [
    "ClaimOrchestrator",
    "ClaimOutcome",
    "ClaimReport",
    "PlatformInstructions",
    "ResponseBuilder",
    "ClaimAttempt",
    "ClaimLedger",
    "InMemoryLedger",
    "PostgresLedger",
    "LedgerError",
    "create_ledger_from_env",
]
