"""
Fallback Executor — Sequential Provider Failover

Given the ordered provider list from the Task Router, the executor tries
one provider after another until one produces a normalized result or the
list is exhausted.

  for provider in ordered list:
      AdapterResult  ← adapter.invoke()        (bounded by per-attempt timeout)
      Normalized     ← normalizer.normalize()  (only if the call succeeded)
      success        → stop, return it
      failure        → log classification, next provider

Failure policy:
  - Failover on:  non-2xx, transport errors, timeouts, undecodable JSON,
                  payloads the normalizer rejects, unexpected adapter
                  exceptions
  - No retries:   each provider is attempted at most once per task
  - Sequential:   never fans out in parallel

Exhaustion is NOT an exception. execute() returns the "all providers
failed" sentinel outcome and the gateway turns it into a degraded result.

Unlike a circuit breaker, the executor keeps no health state between
tasks: for a fixed configuration snapshot and task type the sequence of
providers attempted is always the same.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

import httpx

from docgateway.orchestration.normalizer import Normalized, ResponseNormalizer
from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.providers import ProviderAdapter, ProviderCall, default_adapters
from docgateway.schemas.tasks import FailureKind, ProviderAttempt

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ExecutionOutcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecutionOutcome:
    """
    Result of one fallback run.

    ok=True:   provider + normalized hold the first successful answer
    ok=False:  sentinel, failure is ALL_PROVIDERS_EXHAUSTED
    attempts:  every adapter invocation, in call order
    """
    ok:         bool
    provider:   str | None                  = None
    normalized: Normalized | None           = None
    attempts:   tuple[ProviderAttempt, ...] = ()
    failure:    FailureKind | None          = None

    @classmethod
    def exhausted(cls, attempts: Sequence[ProviderAttempt]) -> "ExecutionOutcome":
        return cls(ok=False, attempts=tuple(attempts), failure=FailureKind.ALL_PROVIDERS_EXHAUSTED)


# ---------------------------------------------------------------------------
# FallbackExecutor
# ---------------------------------------------------------------------------

class FallbackExecutor:
    """
    Ordered provider chain with automatic failover.

    Usage::

        executor = FallbackExecutor(client)
        outcome  = await executor.execute(router.providers_for(task, registry), call)

    The executor is stateless per request and safe to share across
    concurrent tasks.
    """

    def __init__(
        self,
        client:              httpx.AsyncClient,
        adapters:            Mapping[str, ProviderAdapter] | None = None,
        normalizer:          ResponseNormalizer | None            = None,
        per_attempt_timeout: float | None                         = None,   # None = descriptor.timeout
    ) -> None:
        self._client              = client
        self._adapters            = dict(adapters) if adapters is not None else default_adapters()
        self._normalizer          = normalizer or ResponseNormalizer()
        self._per_attempt_timeout = per_attempt_timeout

    async def attempt(
        self,
        descriptor: ProviderDescriptor,
        call:       ProviderCall,
    ) -> tuple[ProviderAttempt, Normalized | None]:
        """
        Invoke one provider and normalize its answer.

        Returns the attempt record and, on success, the normalized result.
        """
        adapter = self._adapters.get(descriptor.name)
        if adapter is None:
            return ProviderAttempt(
                provider=descriptor.name, ok=False,
                failure=FailureKind.CONFIGURATION_MISSING,
                detail="no adapter registered",
            ), None

        timeout = self._per_attempt_timeout or descriptor.timeout
        try:
            result = await asyncio.wait_for(
                adapter.invoke(self._client, descriptor, call),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            return ProviderAttempt(
                provider=descriptor.name, ok=False,
                failure=FailureKind.TRANSPORT_FAILURE,
                detail=f"timed out after {timeout}s",
            ), None
        except Exception as exc:
            logger.error(
                "FallbackExecutor | provider=%s adapter raised %s",
                descriptor.name, type(exc).__name__, exc_info=True,
            )
            return ProviderAttempt(
                provider=descriptor.name, ok=False,
                failure=FailureKind.TRANSPORT_FAILURE,
                detail=f"adapter error ({type(exc).__name__})",
            ), None

        if not result.ok:
            return ProviderAttempt(
                provider=descriptor.name, ok=False,
                failure=result.failure, detail=result.detail,
            ), None

        normalized = self._normalizer.normalize(descriptor, result.payload)
        if not normalized.ok:
            return ProviderAttempt(
                provider=descriptor.name, ok=False,
                failure=normalized.failure, detail=normalized.detail,
            ), None

        logger.debug(
            "FallbackExecutor | provider=%s ok latency_ms=%.1f",
            descriptor.name, result.latency_ms,
        )
        return ProviderAttempt(provider=descriptor.name, ok=True), normalized

    async def execute(
        self,
        descriptors: Sequence[ProviderDescriptor],
        call:        ProviderCall,
    ) -> ExecutionOutcome:
        """
        Try providers strictly in order; stop at the first success.

        Never raises for provider failures. Returns the exhausted sentinel
        when every provider failed or the list is empty.
        """
        attempts: list[ProviderAttempt] = []

        for descriptor in descriptors:
            logger.debug("FallbackExecutor | trying provider=%s task=%s", descriptor.name, call.task.value)
            record, normalized = await self.attempt(descriptor, call)
            attempts.append(record)

            if normalized is not None:
                return ExecutionOutcome(
                    ok=True,
                    provider=descriptor.name,
                    normalized=normalized,
                    attempts=tuple(attempts),
                )

            logger.warning(
                "FallbackExecutor | provider=%s failure=%s detail=%s",
                descriptor.name,
                record.failure.value if record.failure else "-",
                record.detail,
            )

        if attempts:
            logger.warning(
                "FallbackExecutor | all providers failed task=%s tried=%s",
                call.task.value, [a.provider for a in attempts],
            )
        return ExecutionOutcome.exhausted(attempts)
