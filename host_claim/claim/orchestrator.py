"""Claim request flow: authenticate, validate, claim, report."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import anyio

from ..cloud.collaborators import ClaimAgent, CloudConnector
from ..cloud.status import CloudStatus, CloudStatusEvaluator
from ..config import ClaimConfig
from ..params.request import ClaimCredentials, ClaimParameters, InvalidClaimParameters
from ..proof.store import ProofTokenStore
from ..utils.time import epoch_seconds
from .ledger import ClaimAttempt, ClaimLedger, InMemoryLedger, LedgerError
from .report import INVALID_KEY, ClaimOutcome, ClaimReport, ResponseBuilder

logger = logging.getLogger(__name__)

FORBIDDEN = "forbidden"
INVALID_PARAMETERS = "invalid_parameters"
CLAIMED = "claimed"
CLAIM_FAILED = "claim_failed"


@dataclass(frozen=True)
class _GateResult:
    credentials: Optional[ClaimCredentials]
    outcome: str = ""
    reason: str = ""


class ClaimOrchestrator:
    """Handles one claim request at a time against shared proof token state.

    The only state kept between requests is the proof token, which is rotated
    after every authentication attempt. Requests without ``key``, or made while
    the host cannot be claimed, only report status and never rotate it.
    """

    def __init__(
        self,
        *,
        tokens: ProofTokenStore,
        agent: ClaimAgent,
        connector: CloudConnector,
        config: Optional[ClaimConfig] = None,
        builder: Optional[ResponseBuilder] = None,
        ledger: Optional[ClaimLedger] = None,
        clock: Callable[[], int] = epoch_seconds,
    ) -> None:
        self.tokens = tokens
        self.agent = agent
        self.connector = connector
        self.config = config or ClaimConfig()
        self.evaluator = CloudStatusEvaluator(connector)
        self.builder = builder or ResponseBuilder(platform=self.config.platform)
        self.ledger = ledger or InMemoryLedger()
        self.clock = clock
        self._inflight: set[asyncio.Task] = set()

    async def handle(self, params: ClaimParameters) -> ClaimReport:
        now = self.clock()
        status, can_be_claimed = self.evaluator.compute(now)

        if not (can_be_claimed and params.key):
            return self._report(can_be_claimed=can_be_claimed)

        gate = await anyio.to_thread.run_sync(self._authenticate, params)
        if gate.credentials is None:
            await self._record(ClaimAttempt(outcome=gate.outcome, reason=gate.reason, status_before=status.value))
            if gate.outcome == FORBIDDEN:
                return self.builder.forbidden()
            return self.builder.bad_request()

        # A caller that goes away must not interrupt a claim halfway.
        task = asyncio.ensure_future(self._claim(gate.credentials, status))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return await asyncio.shield(task)

    async def _claim(self, creds: ClaimCredentials, status_before: CloudStatus) -> ClaimReport:
        outcome: Optional[ClaimOutcome] = None
        status_after: Optional[str] = None
        logger.info("Claiming host with %s (rooms=%s)", creds.base_url, creds.rooms or "-")
        try:
            if await self.agent.claim(creds.base_url, creds.token, creds.rooms, self.config.proxy, self.config.insecure):
                outcome = ClaimOutcome(success=True, message="ok")
                reloaded = await self.connector.reload_and_wait_online()
                logger.info("Host claimed; cloud status after reload: %s", reloaded.value)
            else:
                outcome = ClaimOutcome(success=False, message=self.agent.failure_reason())
                logger.error("Claim request to %s failed: %s", creds.base_url, outcome.message)

            report = self._report(can_be_claimed=not outcome.success, outcome=outcome)
            status_after = report.body["cloud"]["status"]
            return report
        finally:
            await self._record(
                ClaimAttempt(
                    outcome=CLAIMED if outcome is not None and outcome.success else CLAIM_FAILED,
                    reason=outcome.message if outcome is not None else "claim call did not complete",
                    status_before=status_before.value,
                    status_after=status_after,
                    base_url=creds.base_url,
                    rooms=creds.rooms,
                )
            )

    async def drain(self) -> None:
        """Wait for claims whose callers went away."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    def _authenticate(self, params: ClaimParameters) -> _GateResult:
        # The token is rotated when this block exits, before any remote call.
        with self.tokens.rotating():
            if not self.tokens.matches(params.key):
                logger.warning("Claim rejected: proof key does not match")
                return _GateResult(None, FORBIDDEN, INVALID_KEY)
            try:
                return _GateResult(params.credentials())
            except InvalidClaimParameters as exc:
                logger.warning("Claim rejected: invalid parameter %s (%s)", exc.field, exc.reason)
                return _GateResult(None, INVALID_PARAMETERS, str(exc))

    def _report(self, *, can_be_claimed: bool, outcome: Optional[ClaimOutcome] = None) -> ClaimReport:
        now = self.clock()
        _, cloud = self.evaluator.describe(now)
        proof_path = self.tokens.current_path() if can_be_claimed else None
        return self.builder.build(
            cloud=cloud,
            can_be_claimed=can_be_claimed,
            now=now,
            outcome=outcome,
            proof_path=proof_path,
        )

    async def _record(self, attempt: ClaimAttempt) -> None:
        try:
            await self.ledger.record(attempt)
        except LedgerError as exc:
            logger.error("Claim attempt %s not recorded: %s", attempt.attempt_id, exc)