"""
Shared FastAPI dependencies.

One DocumentTaskGateway per process: it owns the HTTP connection pool and
the ConfigStore. Tests replace it through app.dependency_overrides.
"""

from __future__ import annotations

from docgateway.orchestration.gateway import DocumentTaskGateway

_gateway: DocumentTaskGateway | None = None


def get_gateway() -> DocumentTaskGateway:
    global _gateway
    if _gateway is None:
        _gateway = DocumentTaskGateway()
    return _gateway


async def close_gateway() -> None:
    global _gateway
    if _gateway is not None:
        await _gateway.aclose()
        _gateway = None
