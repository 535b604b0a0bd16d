from enum import Enum
from typing import Optional


class SemanticDomain(str, Enum):
    """Short aliases the middleware knows, each tied to a canonical host."""

    GITHUB = "g"
    # routes to the start of the traefik chain
    APP = "app"

    def canonical_host(self) -> str:
        return _CANONICAL_HOSTS[self]

    @classmethod
    def lookup(cls, alias: str) -> Optional["SemanticDomain"]:
        try:
            return cls(alias)
        except ValueError:
            return None


_CANONICAL_HOSTS = {
    SemanticDomain.GITHUB: "github.com",
    SemanticDomain.APP: "traefik.alexheld.io",
}

CANONICAL_HOSTS = frozenset(_CANONICAL_HOSTS.values())
