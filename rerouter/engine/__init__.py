"""
Host-alias rewrite engine.

``classify_and_rewrite`` is the single entry point: it classifies the request
host, applies the selected strategy and returns a ``RewriteOutcome``. Engine
failures never escape it; they are returned as typed errors on the outcome.
"""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from rerouter.config import ReRouterConfig
from rerouter.engine.classifier import classify
from rerouter.engine.errors import ClassificationError, RerouterError, RewriteError
from rerouter.engine.rewriter import rewrite
from rerouter.engine.strategies import (
    NoOp,
    RewriteOwnAlias,
    RewriteStrategy,
    RewriteThirdPartyAlias,
)
from rerouter.models import RequestURL


@dataclass
class RewriteOutcome:
    """Result of classifying and rewriting one request URL."""

    original: RequestURL
    strategy: Optional[RewriteStrategy] = None
    url: Optional[RequestURL] = None
    error: Optional[RerouterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def rewritten(self) -> bool:
        return self.ok and not isinstance(self.strategy, NoOp)

    @property
    def status_code(self) -> int:
        if self.ok:
            return HTTPStatus.OK
        return HTTPStatus.MISDIRECTED_REQUEST


def classify_and_rewrite(
    url: RequestURL, config: Optional[ReRouterConfig] = None
) -> RewriteOutcome:
    outcome = RewriteOutcome(original=url)
    try:
        outcome.strategy = classify(url.host, config)
        outcome.url = rewrite(outcome.strategy, url, config)
    except RerouterError as e:
        outcome.url = None
        outcome.error = e
    return outcome


__all__ = [
    "ClassificationError",
    "NoOp",
    "RerouterError",
    "RewriteError",
    "RewriteOutcome",
    "RewriteOwnAlias",
    "RewriteStrategy",
    "RewriteThirdPartyAlias",
    "classify",
    "classify_and_rewrite",
    "rewrite",
]
