"""
Positional hostname classification.

Labels are read right-to-left: ``label[0]`` is the TLD and a higher index is
more specific, so ``gh.someone.tl`` splits into ``["tl", "someone", "gh"]``.
The rules only look at ``label[0..2]``:

    gh.someone.tl/path   -> github.com/someone/path     (third-party alias)
    gh.alexheld.io/path  -> github.com/alex-held/path   (own alias)
    anything else        -> unchanged
"""

from typing import List, Optional

from rerouter.config import ReRouterConfig
from rerouter.engine.domains import CANONICAL_HOSTS
from rerouter.engine.errors import ClassificationError
from rerouter.engine.strategies import (
    NoOp,
    RewriteOwnAlias,
    RewriteStrategy,
    RewriteThirdPartyAlias,
)

MIN_LABELS = 3


def normalize_hostname(hostname: str) -> str:
    """Lowercase the host and drop a ``:port`` suffix and a single trailing dot."""
    host = (hostname or "").strip().lower()
    if host.startswith("["):
        # IPv6 literal, never an alias
        return host
    host = host.rsplit(":", 1)[0] if ":" in host else host
    if host.endswith("."):
        host = host[:-1]
    return host


def split_labels(hostname: str) -> List[str]:
    """Split a hostname into labels, TLD first."""
    return list(reversed(hostname.split(".")))


def classify(
    hostname: str, config: Optional[ReRouterConfig] = None
) -> RewriteStrategy:
    """
    Select the rewrite strategy for a hostname.

    Raises:
        ClassificationError: the host is empty, has fewer than three labels
            or contains an empty label.
    """
    config = config or ReRouterConfig()
    host = normalize_hostname(hostname)
    if not host:
        raise ClassificationError("empty hostname", hostname=hostname)

    if host in CANONICAL_HOSTS:
        return NoOp()

    labels = split_labels(host)
    # two-label hosts such as example.com or a.b are rejected; only the
    # canonical hosts above pass through with fewer labels
    if len(labels) < MIN_LABELS:
        raise ClassificationError(
            f"hostname {hostname!r} has {len(labels)} labels, "
            f"at least {MIN_LABELS} are required",
            hostname=hostname,
            labels=labels,
        )
    if any(label == "" for label in labels):
        raise ClassificationError(
            f"hostname {hostname!r} contains an empty label",
            hostname=hostname,
            labels=labels,
        )

    is_github_alias = labels[2] in {a.lower() for a in config.github_aliases}
    domain = f"{labels[1]}.{labels[0]}"

    if is_github_alias and domain != config.own_domain.lower():
        return RewriteThirdPartyAlias(owner=labels[1])
    if is_github_alias:
        return RewriteOwnAlias()
    return NoOp()
