import logging
from typing import Optional, Dict
from contextlib import contextmanager

from opentelemetry.trace import Tracer

logger = logging.getLogger("uvicorn.error")


@contextmanager
def traced_rewrite(
    tracer: Tracer,
    operation: str,
    url: str,
    middleware_name: Optional[str],
    extra_attrs: Optional[Dict] = None,
):
    """Context manager to create a span around a rewrite and set common attributes."""
    with tracer.start_as_current_span(operation) as span:
        span.set_attribute("rerouter.old_url", url)
        if middleware_name:
            span.set_attribute("rerouter.middleware", middleware_name)
        if extra_attrs:
            for k, v in extra_attrs.items():
                span.set_attribute(k, v)
        logger.debug(f"[ReRouter] {operation} url={url}")
        yield span
