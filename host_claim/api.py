"""HTTP surface for the claiming endpoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ._version import __version__
from .claim.ledger import ClaimLedger, create_ledger_from_env
from .claim.orchestrator import ClaimOrchestrator
from .claim.report import ResponseBuilder
from .cloud.collaborators import ClaimAgent, CloudConnector
from .config import ClaimConfig, configure_logging
from .params.request import ClaimParameters
from .proof.store import ProofTokenStore

CLAIM_PATH = "/api/v2/claim"


def build_router(orchestrator: ClaimOrchestrator) -> APIRouter:
    router = APIRouter(tags=["claim"])

    @router.get(CLAIM_PATH)
    async def claim(request: Request) -> Response:
        params = ClaimParameters.from_mapping(request.query_params)
        report = await orchestrator.handle(params)
        if report.is_text:
            return PlainTextResponse(report.text, status_code=report.http_status)
        return JSONResponse(report.body, status_code=report.http_status)

    return router


def build_orchestrator(
    *,
    agent: ClaimAgent,
    connector: CloudConnector,
    config: ClaimConfig,
    ledger: Optional[ClaimLedger] = None,
    tokens: Optional[ProofTokenStore] = None,
) -> ClaimOrchestrator:
    """Wire the claim flow from its collaborators."""
    return ClaimOrchestrator(
        tokens=tokens or ProofTokenStore(config.state_dir),
        agent=agent,
        connector=connector,
        config=config,
        builder=ResponseBuilder(platform=config.platform, version=__version__),
        ledger=ledger or create_ledger_from_env(),
    )


def create_app(
    *,
    agent: ClaimAgent,
    connector: CloudConnector,
    config: Optional[ClaimConfig] = None,
    ledger: Optional[ClaimLedger] = None,
    tokens: Optional[ProofTokenStore] = None,
) -> FastAPI:
    """Create a ready-to-serve FastAPI app exposing the claim endpoint."""
    config = config or ClaimConfig.from_env()
    configure_logging(config.log_level)
    orchestrator = build_orchestrator(agent=agent, connector=connector, config=config, ledger=ledger, tokens=tokens)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await orchestrator.drain()
        await orchestrator.ledger.close()

    app = FastAPI(title="host-claim", version=__version__, lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.include_router(build_router(orchestrator))
    return app
