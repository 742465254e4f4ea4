"""
Providers API — Status, Credentials, Connection Check

GET  /api/v1/providers              → availability of every provider
PUT  /api/v1/providers/credentials  → replace API keys (atomic swap)
POST /api/v1/providers/check        → probe each configured provider

Responses never contain credential values.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from docgateway.api.deps import get_gateway
from docgateway.orchestration.gateway import DocumentTaskGateway
from docgateway.schemas.providers import CredentialUpdate, ProviderCheck, ProviderStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/providers", tags=["Providers"])


@router.get("", response_model=list[ProviderStatus], summary="List providers and availability")
async def list_providers(
    gateway: Annotated[DocumentTaskGateway, Depends(get_gateway)],
) -> list[ProviderStatus]:
    return gateway.provider_statuses()


@router.put(
    "/credentials",
    response_model=list[ProviderStatus],
    summary="Replace provider credentials",
    description=(
        "Omitted fields keep their current value; an empty string disables the "
        "provider. Tasks already running finish on the previous configuration."
    ),
)
async def update_credentials(
    body:    CredentialUpdate,
    gateway: Annotated[DocumentTaskGateway, Depends(get_gateway)],
) -> list[ProviderStatus]:
    changes = body.changes()
    logger.info("Providers API | credential update fields=%s", sorted(changes))
    return gateway.update_credentials(changes)


@router.post("/check", response_model=list[ProviderCheck], summary="Test provider connections")
async def check_providers(
    gateway: Annotated[DocumentTaskGateway, Depends(get_gateway)],
) -> list[ProviderCheck]:
    return await gateway.check_providers()
