"""Run an end-to-end claim against the simulated cloud, including a replay attempt."""

from __future__ import annotations

import asyncio
import logging
import tempfile

from ..api import build_orchestrator
from ..config import ClaimConfig
from ..params.request import ClaimParameters
from .simulated import DEFAULT_URL, SimulatedCloud


def read_proof(path: str) -> str:
    with open(path, encoding="ascii") as fh:
        return fh.read().strip()


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    with tempfile.TemporaryDirectory() as state_dir:
        cloud = SimulatedCloud()
        orchestrator = build_orchestrator(agent=cloud, connector=cloud, config=ClaimConfig(state_dir=state_dir))

        status = await orchestrator.handle(ClaimParameters())
        print("STATUS:", status.http_status, status.body)

        guessed = await orchestrator.handle(ClaimParameters(key="00000000-0000-4000-8000-000000000000"))
        print("WRONG KEY:", guessed.http_status, guessed.text)

        key = read_proof(orchestrator.tokens.current_path())
        claimed = await orchestrator.handle(ClaimParameters(key=key, token="abc", base_url=DEFAULT_URL))
        print("CLAIM:", claimed.http_status, claimed.body)

        replay = await orchestrator.handle(ClaimParameters(key=key, token="abc", base_url=DEFAULT_URL))
        print("REPLAY:", replay.http_status, replay.body)

        for attempt in await orchestrator.ledger.recent():
            print("LEDGER:", attempt.outcome, attempt.reason)


if __name__ == "__main__":
    asyncio.run(main())
