from docgateway.observability.tracing import configure_logging, traced

__all__ = ["configure_logging", "traced"]
