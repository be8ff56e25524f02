"""Serve the claim endpoint backed by the simulated cloud.

    HOST_CLAIM_STATE_DIR=/tmp python examples/serve_claim_endpoint.py
    curl 'http://127.0.0.1:8000/api/v2/claim'
"""

from __future__ import annotations

import os

import uvicorn

from host_claim import ClaimConfig, create_app
from host_claim.demo import SimulatedCloud


def main() -> None:
    cloud = SimulatedCloud()
    app = create_app(agent=cloud, connector=cloud, config=ClaimConfig.from_env())
    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()
