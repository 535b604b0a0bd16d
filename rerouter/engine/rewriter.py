import re
from typing import Optional
from urllib.parse import urlsplit

from rerouter.config import ReRouterConfig
from rerouter.engine.domains import SemanticDomain
from rerouter.engine.errors import RewriteError
from rerouter.engine.strategies import (
    NoOp,
    RewriteOwnAlias,
    RewriteStrategy,
    RewriteThirdPartyAlias,
)
from rerouter.models import RequestURL

# RFC 3986 section 3.1
SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")
FORBIDDEN_CHARS_PATTERN = re.compile(r"[\x00-\x20\x7f]")


def parse_absolute_uri(raw_url: str, old_url: str = "") -> RequestURL:
    """
    Parse ``raw_url`` as an absolute URI.

    Raises:
        RewriteError: the scheme is malformed, the host is missing, or the URL
            contains whitespace, control characters or broken percent escapes.
    """

    def _fail(reason: str) -> RewriteError:
        return RewriteError(
            f"unable to parse the new URL {raw_url!r}: {reason}",
            old_url=old_url,
            new_url=raw_url,
            reason=reason,
        )

    if FORBIDDEN_CHARS_PATTERN.search(raw_url):
        raise _fail("whitespace or control character in URL")
    if BAD_ESCAPE_PATTERN.search(raw_url):
        raise _fail("invalid percent escape")

    try:
        parts = urlsplit(raw_url)
    except ValueError as e:
        raise _fail(str(e)) from e

    if not SCHEME_PATTERN.match(parts.scheme or ""):
        raise _fail("missing or malformed scheme")
    if not parts.netloc:
        raise _fail("missing host")
    if parts.fragment:
        raise _fail("fragment not allowed in request URI")

    return RequestURL(
        scheme=parts.scheme,
        host=parts.netloc,
        raw_path=parts.path,
        query=parts.query,
    )


def _build(original: RequestURL, owner: str) -> str:
    github = SemanticDomain.GITHUB.canonical_host()
    raw_url = f"{original.scheme}://{github}/{owner}/{original.path_without_slash}"
    if original.query:
        raw_url = f"{raw_url}?{original.query}"
    return raw_url


def rewrite(
    strategy: RewriteStrategy,
    original: RequestURL,
    config: Optional[ReRouterConfig] = None,
) -> RequestURL:
    """Apply ``strategy`` to ``original`` and return the rewritten URL."""
    config = config or ReRouterConfig()

    if isinstance(strategy, NoOp):
        return original
    if isinstance(strategy, RewriteOwnAlias):
        raw_url = _build(original, config.own_owner)
    elif isinstance(strategy, RewriteThirdPartyAlias):
        raw_url = _build(original, strategy.owner)
    else:
        raise TypeError(f"Unknown rewrite strategy: {strategy!r}")

    return parse_absolute_uri(raw_url, old_url=str(original))
