"""
Document Task Gateway — Unified Entry Point for all Document Tasks

The gateway is the single call site for the HTTP layer. It composes:

  ┌──────────────────────────────────────────────────────────┐
  │  DocumentTaskGateway.perform_task()                      │
  │       │                                                  │
  │       ▼                                                  │
  │  TaskRequest.create()         ← validate (may raise)     │
  │       │                                                  │
  │       ▼                                                  │
  │  ConfigStore.snapshot()       ← one snapshot per task    │
  │       │                                                  │
  │       ▼                                                  │
  │  TaskRouter.providers_for()   ← ordered, available       │
  │       │            └─ empty ──► DegradationProvider      │
  │       ▼                                                  │
  │  EnrichmentPipeline.enrich()  ← best-effort signals      │
  │       │                                                  │
  │       ▼                                                  │
  │  FallbackExecutor.execute()   ← sequential failover      │
  │       │            └─ exhausted ──► DegradationProvider  │
  │       ▼                                                  │
  │  TaskResult (normalized)                                 │
  └──────────────────────────────────────────────────────────┘

Usage::

    async with DocumentTaskGateway() as gateway:
        result = await gateway.perform_task(
            "translate", "hello", options={"source_language": "en", "target_language": "hi"},
        )
        if result.degraded:
            ...

perform_task() never raises for missing configuration or provider failures;
those resolve to a degraded TaskResult. Only InvalidTaskRequest escapes.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from docgateway.observability.tracing import traced
from docgateway.orchestration.degradation import DegradationProvider
from docgateway.orchestration.enrichment import EnrichmentPipeline
from docgateway.orchestration.fallback import FallbackExecutor
from docgateway.orchestration.normalizer import ResponseNormalizer
from docgateway.orchestration.prompts import build_call
from docgateway.orchestration.registry import ConfigSnapshot, ConfigStore
from docgateway.orchestration.requests import TaskRequest
from docgateway.orchestration.router import TaskRouter
from docgateway.providers import ProviderAdapter, default_adapters
from docgateway.schemas.providers import ConnectionState, ProviderCheck, ProviderStatus
from docgateway.schemas.tasks import FailureKind, TaskOptions, TaskResult, TaskType

logger = logging.getLogger(__name__)


class DocumentTaskGateway:
    """
    Provider-agnostic document task interface with routing, enrichment,
    fallback and degradation.

    Instantiate once per application. All public methods are async and safe
    for concurrent use: tasks share only the read-only config snapshot and
    the HTTP connection pool.
    """

    def __init__(
        self,
        store:       ConfigStore | None                    = None,
        client:      httpx.AsyncClient | None              = None,
        adapters:    Mapping[str, ProviderAdapter] | None  = None,
        router:      TaskRouter | None                     = None,
        normalizer:  ResponseNormalizer | None             = None,
        degradation: DegradationProvider | None            = None,
    ) -> None:
        self._store       = store or ConfigStore()
        self._owns_client = client is None
        self._client      = client or httpx.AsyncClient(
            timeout=self._store.snapshot().settings.provider_timeout_seconds,
        )
        self._adapters    = dict(adapters) if adapters is not None else default_adapters()
        self._router      = router
        self._executor    = FallbackExecutor(self._client, self._adapters, normalizer)
        self._degradation = degradation or DegradationProvider()

    async def __aenter__(self) -> "DocumentTaskGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def store(self) -> ConfigStore:
        return self._store

    def _router_for(self, snapshot: ConfigSnapshot) -> TaskRouter:
        return self._router if self._router is not None else snapshot.router

    # -----------------------------------------------------------------------
    # Task execution
    # -----------------------------------------------------------------------

    async def perform_task(
        self,
        task:    TaskType | str,
        text:    str,
        context: str | None = None,
        options: TaskOptions | Mapping[str, Any] | None = None,
    ) -> TaskResult:
        """
        Run one document task end to end.

        Raises:
            InvalidTaskRequest: Unknown task type or missing required fields.
        """
        # caller errors are raised before the traced span opens
        request = TaskRequest.create(task, text, context, options)
        return await self.run(request)

    @traced("run_task")
    async def run(self, request: TaskRequest) -> TaskResult:
        snapshot  = self._store.snapshot()
        router    = self._router_for(snapshot)
        providers = router.providers_for(request.task, snapshot.registry)

        if not providers:
            capability = router.route(request.task)
            expected   = list(router.preference(request.task)) + [
                d.name for d in snapshot.registry.descriptors()
                if d.capability == capability and d.name not in router.preference(request.task)
            ]
            return self._degradation.placeholder_for(
                request, FailureKind.CONFIGURATION_MISSING, expected=expected,
            )

        enriched = await EnrichmentPipeline(self._executor, router).enrich(request, snapshot)
        call     = build_call(enriched)

        t0      = time.perf_counter()
        outcome = await self._executor.execute(providers, call)
        latency = (time.perf_counter() - t0) * 1000

        if not outcome.ok or outcome.normalized is None:
            return self._degradation.placeholder_for(
                request, FailureKind.ALL_PROVIDERS_EXHAUSTED, attempts=outcome.attempts,
            )

        normalized = outcome.normalized
        logger.info(
            "DocumentTaskGateway | task=%s provider=%s attempts=%d enriched=%s latency_ms=%.1f",
            request.task.value, outcome.provider, len(outcome.attempts),
            enriched.signals is not None, latency,
        )
        return TaskResult(
            task=request.task,
            provider=outcome.provider or "",
            degraded=False,
            text=normalized.text,
            entities=list(normalized.entities),
            sentiment=normalized.sentiment,
            attempts=list(outcome.attempts),
        )

    # -----------------------------------------------------------------------
    # Provider status / configuration
    # -----------------------------------------------------------------------

    def provider_statuses(self) -> list[ProviderStatus]:
        return [
            ProviderStatus(
                name=d.name,
                capability=d.capability,
                model=d.model,
                base_url=d.base_url,
                available=d.is_available,
            )
            for d in self._store.snapshot().registry.descriptors()
        ]

    def update_credentials(self, changes: Mapping[str, str]) -> list[ProviderStatus]:
        """Atomically swap in new credentials; in-flight tasks keep their snapshot."""
        self._store.update_credentials(changes)
        return self.provider_statuses()

    async def check_providers(self) -> list[ProviderCheck]:
        """
        Probe every configured provider once with its cheapest request.

        Unconfigured providers are reported without any network call.
        """
        checks: list[ProviderCheck] = []
        for descriptor in self._store.snapshot().registry.descriptors():
            adapter = self._adapters.get(descriptor.name)
            if not descriptor.is_available or adapter is None:
                checks.append(ProviderCheck(name=descriptor.name, state=ConnectionState.NOT_CONFIGURED))
                continue

            try:
                result = await adapter.probe(self._client, descriptor)
            except Exception as exc:
                logger.error(
                    "DocumentTaskGateway | check provider=%s adapter raised %s",
                    descriptor.name, type(exc).__name__, exc_info=True,
                )
                checks.append(ProviderCheck(
                    name=descriptor.name, state=ConnectionState.FAILED,
                    detail=f"adapter error ({type(exc).__name__})",
                ))
                continue
            state  = ConnectionState.CONNECTED if result.ok else ConnectionState.FAILED
            checks.append(ProviderCheck(name=descriptor.name, state=state, detail=result.detail))
            logger.info("DocumentTaskGateway | check provider=%s state=%s", descriptor.name, state.value)
        return checks
