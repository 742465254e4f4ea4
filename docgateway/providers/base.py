"""
Provider adapter contract

Every external capability (chat model, translation API, NLP API) sits
behind the same two-step contract:

  build_request(descriptor, call) -> RequestSpec    ← provider wire envelope
  invoke(client, descriptor, call) -> AdapterResult ← send + classify

Adapters are stateless: per-snapshot data (credentials, endpoints, model
ids) arrives on the ProviderDescriptor at call time, so a configuration
change never requires rebuilding adapters.

invoke() never raises for provider problems. Non-2xx responses, transport
errors, timeouts, undecodable bodies and credentials that cannot be
encoded into a header all come back as a failed
AdapterResult carrying a FailureKind. Extracting the answer from the raw
payload is the Response Normalizer's job, not the adapter's.

Error details never include URLs: some providers take the API key as a
query parameter.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.schemas.tasks import FailureKind, TaskType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProviderCall:
    """
    Everything an adapter may need for one invocation.

    prompt / system:   rendered prompts for generation providers
    text:              raw document text (translation, NER, summarizers)
    source_language:   None = let the provider detect it
    """
    task:            TaskType
    prompt:          str        = ""
    system:          str        = ""
    text:            str        = ""
    source_language: str | None = None
    target_language: str | None = None


@dataclass(frozen=True)
class RequestSpec:
    method:  str
    url:     str
    headers: dict[str, str] = field(default_factory=dict)
    params:  dict[str, str] = field(default_factory=dict)
    json:    Any            = None


@dataclass(frozen=True)
class AdapterResult:
    """Raw provider response plus success flag. Consumed immediately, never retained."""
    provider:    str
    ok:          bool
    payload:     Any                = None
    failure:     FailureKind | None = None
    detail:      str | None         = None
    status_code: int | None         = None
    latency_ms:  float              = 0.0

    @classmethod
    def success(cls, provider: str, payload: Any, status_code: int, latency_ms: float) -> "AdapterResult":
        return cls(provider=provider, ok=True, payload=payload,
                   status_code=status_code, latency_ms=latency_ms)

    @classmethod
    def failed(
        cls,
        provider:    str,
        failure:     FailureKind,
        detail:      str,
        status_code: int | None = None,
        latency_ms:  float      = 0.0,
    ) -> "AdapterResult":
        return cls(provider=provider, ok=False, failure=failure, detail=detail,
                   status_code=status_code, latency_ms=latency_ms)


class AdapterError(RuntimeError):
    """Raised when an adapter cannot build a request for the given call."""


# ---------------------------------------------------------------------------
# ProviderAdapter
# ---------------------------------------------------------------------------

class ProviderAdapter:
    """Base class: subclasses only describe their wire envelopes."""

    name: str = ""

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        raise NotImplementedError

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        """Cheapest request that proves the credential and endpoint work."""
        raise NotImplementedError

    async def invoke(
        self,
        client:     httpx.AsyncClient,
        descriptor: ProviderDescriptor,
        call:       ProviderCall,
    ) -> AdapterResult:
        try:
            spec = self.build_request(descriptor, call)
        except (AdapterError, KeyError) as exc:
            return AdapterResult.failed(descriptor.name, FailureKind.CONFIGURATION_MISSING, str(exc))
        return await self._send(client, descriptor, spec)

    async def probe(self, client: httpx.AsyncClient, descriptor: ProviderDescriptor) -> AdapterResult:
        try:
            spec = self.probe_request(descriptor)
        except (AdapterError, KeyError) as exc:
            return AdapterResult.failed(descriptor.name, FailureKind.CONFIGURATION_MISSING, str(exc))
        return await self._send(client, descriptor, spec)

    async def _send(
        self,
        client:     httpx.AsyncClient,
        descriptor: ProviderDescriptor,
        spec:       RequestSpec,
    ) -> AdapterResult:
        t0 = time.perf_counter()
        try:
            response = await client.request(
                spec.method,
                spec.url,
                headers=spec.headers,
                params=spec.params or None,
                json=spec.json,
                timeout=descriptor.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            return AdapterResult.failed(
                descriptor.name, FailureKind.TRANSPORT_FAILURE,
                f"HTTP {status} {exc.response.reason_phrase}",
                status_code=status, latency_ms=_elapsed(t0),
            )
        except httpx.TimeoutException as exc:
            return AdapterResult.failed(
                descriptor.name, FailureKind.TRANSPORT_FAILURE,
                f"timed out ({type(exc).__name__})", latency_ms=_elapsed(t0),
            )
        except httpx.RequestError as exc:
            return AdapterResult.failed(
                descriptor.name, FailureKind.TRANSPORT_FAILURE,
                f"transport error ({type(exc).__name__})", latency_ms=_elapsed(t0),
            )
        except UnicodeEncodeError:
            # httpx encodes header values as ASCII; a pasted key with a smart quote fails here
            return AdapterResult.failed(
                descriptor.name, FailureKind.CONFIGURATION_MISSING,
                "credential contains non-ASCII characters", latency_ms=_elapsed(t0),
            )

        try:
            payload = response.json()
        except ValueError:
            return AdapterResult.failed(
                descriptor.name, FailureKind.MALFORMED_RESPONSE,
                "response body is not valid JSON",
                status_code=response.status_code, latency_ms=_elapsed(t0),
            )

        return AdapterResult.success(descriptor.name, payload, response.status_code, _elapsed(t0))


def _elapsed(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000


def bearer(descriptor: ProviderDescriptor) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {descriptor.credential('api_key')}",
        "Content-Type":  "application/json",
    }
