"""
Orchestration Package

Registry → Router → Enrichment → Fallback → Normalizer → Degradation,
composed by DocumentTaskGateway.

Public API::

    from docgateway.orchestration.gateway import DocumentTaskGateway

    async with DocumentTaskGateway() as gateway:
        result = await gateway.perform_task("summarize", text, options={"length": "short"})

Adapters import the registry's ProviderDescriptor, so this package init
stays import-free.
"""
