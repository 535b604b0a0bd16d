"""
Records rewrite outcomes.

The engine returns structured outcomes and never logs; this observer is
composed at the boundary and decides how each outcome is logged and traced.
"""

import logging
from typing import Optional

from opentelemetry.trace import Span

from rerouter.engine import (
    ClassificationError,
    NoOp,
    RewriteError,
    RewriteOutcome,
)

_default_logger = logging.getLogger("uvicorn.error")


class RewriteObserver:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or _default_logger

    def record(self, outcome: RewriteOutcome, span: Optional[Span] = None) -> None:
        old_url = str(outcome.original)
        if span is not None:
            span.set_attribute("rerouter.old_url", old_url)
            if outcome.strategy is not None:
                span.set_attribute("rerouter.strategy", outcome.strategy.name)
            if outcome.url is not None:
                span.set_attribute("rerouter.new_url", str(outcome.url))
            if outcome.error is not None:
                span.set_attribute("rerouter.error", str(outcome.error))

        if outcome.ok:
            if isinstance(outcome.strategy, NoOp):
                self.logger.info(f"[ReRouter] NOOP not rewriting url url={old_url}")
            else:
                self.logger.info(
                    f"[ReRouter] rewrote url; strategy={outcome.strategy.name}, "
                    f"oldURL={old_url}, newURL={outcome.url}"
                )
            return

        error = outcome.error
        if isinstance(error, RewriteError):
            self.logger.error(
                f"[ReRouter] unable to parse the new URL; oldURL={error.old_url}, "
                f"newURL={error.new_url}, reason={error.reason}"
            )
        elif isinstance(error, ClassificationError):
            self.logger.warning(
                f"[ReRouter] unable to classify host; host={error.hostname}, "
                f"url={old_url}: {error}"
            )
        else:
            self.logger.error(f"[ReRouter] rewrite failed; url={old_url}: {error}")
