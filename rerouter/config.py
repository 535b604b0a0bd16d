from typing import List

from pydantic import BaseModel, Field, field_validator

from rerouter import vars as settings

VERSION = "v0.0.6"
MIDDLEWARE_NAME = "ReRouter-Middleware"


class ReRouterConfig(BaseModel):
    """Middleware configuration: version stamp, alias rules and diagnostic header names."""

    version: str = VERSION
    github_aliases: List[str] = Field(default_factory=lambda: ["g", "gh"])
    own_domain: str = "alexheld.io"
    own_owner: str = "alex-held"
    header_version: str = "X-ReRouter-Traefik-Middleware-Version"
    header_default_url: str = "X-ReRouter-Traefik-Middleware-Default-URL"
    header_rerouted_url: str = "X-ReRouter-Traefik-Middleware-ReRouted-URL"

    @field_validator(
        "version", "header_version", "header_default_url", "header_rerouted_url"
    )
    @classmethod
    def must_fit_in_a_header(cls, value: str, info) -> str:
        # ASGI header names and values are latin-1 bytes
        try:
            value.encode("latin-1")
        except UnicodeEncodeError:
            raise ValueError(f"{info.field_name} must be latin-1 encodable: {value!r}")
        if info.field_name != "version" and not value.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return value


def create_config() -> ReRouterConfig:
    """Create the middleware configuration from the environment."""
    return ReRouterConfig(
        version=settings.REROUTER_VERSION,
        github_aliases=list(settings.REROUTER_GITHUB_ALIASES),
        own_domain=settings.REROUTER_OWN_DOMAIN,
        own_owner=settings.REROUTER_OWN_OWNER,
        header_version=settings.REROUTER_HEADER_VERSION,
        header_default_url=settings.REROUTER_HEADER_DEFAULT_URL,
        header_rerouted_url=settings.REROUTER_HEADER_REROUTED_URL,
    )
