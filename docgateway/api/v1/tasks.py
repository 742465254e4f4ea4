"""
Tasks API — Document Task Endpoint

POST /api/v1/tasks  → TaskResult

  - Always 200 when the request is valid, including degraded results:
    "no provider" and "every provider failed" are answers, not errors.
    Clients check `degraded`.
  - 400 INVALID_TASK_REQUEST for requests that can never succeed
    (e.g. translate without a target language).
  - 422 VALIDATION_ERROR for schema violations.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from docgateway.api.deps import get_gateway
from docgateway.orchestration.gateway import DocumentTaskGateway
from docgateway.schemas.tasks import TaskRequestBody, TaskResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post(
    "",
    response_model=TaskResult,
    summary="Run a document task",
    description=(
        "Routes the task to the preferred available provider, falls back on "
        "failure and returns a labelled placeholder (degraded=true) when no "
        "provider can serve it."
    ),
)
async def perform_task(
    body:    TaskRequestBody,
    gateway: Annotated[DocumentTaskGateway, Depends(get_gateway)],
) -> TaskResult:
    return await gateway.perform_task(
        task=body.task,
        text=body.text,
        context=body.context,
        options=body.options,
    )
