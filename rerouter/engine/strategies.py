"""
Rewrite strategies selected by the classifier.

A strategy is chosen once per request and consumed once by the rewriter.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NoOp:
    name = "noop"


@dataclass(frozen=True)
class RewriteOwnAlias:
    name = "own_alias"


@dataclass(frozen=True)
class RewriteThirdPartyAlias:
    owner: str

    name = "third_party_alias"


RewriteStrategy = Union[NoOp, RewriteOwnAlias, RewriteThirdPartyAlias]
