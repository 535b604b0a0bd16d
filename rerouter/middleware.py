import logging
from typing import Iterable, Optional
from urllib.parse import unquote

from opentelemetry import trace
from starlette.datastructures import MutableHeaders
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from rerouter.config import MIDDLEWARE_NAME, ReRouterConfig, create_config
from rerouter.engine import RewriteOutcome, classify_and_rewrite
from rerouter.models import RequestURL
from rerouter.observer import RewriteObserver
from rerouter.utils.traced_requests import traced_rewrite

logger = logging.getLogger("uvicorn.error")
tracer = trace.get_tracer(__name__)

REWRITTEN_STATE_KEY = "rerouter_rewritten"


class ReRouterMiddleware:
    """
    Rewrites alias hosts to their GitHub destination before the next app runs.

    On success the scope handed to the next app carries the rewritten scheme,
    host and path plus the diagnostic headers. On failure the next app is not
    called and the client gets a 421 with the error text.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[ReRouterConfig] = None,
        name: str = MIDDLEWARE_NAME,
        observer: Optional[RewriteObserver] = None,
        bypass_paths: Optional[Iterable[str]] = None,
    ) -> None:
        self.app = app
        self.config = config or create_config()
        self.name = name
        self.observer = observer or RewriteObserver()
        self.bypass_paths = set(bypass_paths or [])
        logger.info(f"[ReRouter] New {MIDDLEWARE_NAME} Middleware instantiated; name={name}")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http" or scope.get("path") in self.bypass_paths:
            await self.app(scope, receive, send)
            return

        url = RequestURL.from_scope(scope)
        with traced_rewrite(
            tracer, "rerouter.rewrite", str(url), self.name
        ) as span:
            outcome = classify_and_rewrite(url, self.config)
            self.observer.record(outcome, span)

        if not outcome.ok:
            response = PlainTextResponse(
                str(outcome.error), status_code=outcome.status_code
            )
            await response(scope, receive, send)
            return

        await self.app(self.apply(scope, outcome), receive, send)

    def apply(self, scope: Scope, outcome: RewriteOutcome) -> Scope:
        """Return a copy of ``scope`` carrying the rewritten URL and diagnostic headers."""
        new_url = outcome.url
        scope = dict(scope)
        scope["scheme"] = new_url.scheme
        scope["path"] = unquote(new_url.raw_path or "/")
        scope["raw_path"] = (new_url.raw_path or "/").encode("latin-1")
        scope["query_string"] = new_url.query.encode("latin-1")

        scope["headers"] = list(scope.get("headers") or [])
        headers = MutableHeaders(scope=scope)
        headers["host"] = new_url.host
        headers[self.config.header_version] = self.config.version
        headers[self.config.header_default_url] = str(outcome.original)
        headers[self.config.header_rerouted_url] = str(new_url)

        # the forwarder only trusts the rewritten host when this is set
        state = dict(scope.get("state") or {})
        state[REWRITTEN_STATE_KEY] = outcome.rewritten
        scope["state"] = state
        return scope
