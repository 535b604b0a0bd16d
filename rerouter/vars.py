import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "rerouter")

REROUTER_VERSION = os.environ.get("REROUTER_VERSION", "v0.0.6")
REROUTER_GITHUB_ALIASES = [
    a.strip().lower()
    for a in os.environ.get("REROUTER_GITHUB_ALIASES", "g,gh").split(",")
    if a.strip()
]
REROUTER_OWN_DOMAIN = os.environ.get("REROUTER_OWN_DOMAIN", "alexheld.io").lower()
REROUTER_OWN_OWNER = os.environ.get("REROUTER_OWN_OWNER", "alex-held")

REROUTER_HEADER_VERSION = os.environ.get(
    "REROUTER_HEADER_VERSION", "X-ReRouter-Traefik-Middleware-Version"
)
REROUTER_HEADER_DEFAULT_URL = os.environ.get(
    "REROUTER_HEADER_DEFAULT_URL", "X-ReRouter-Traefik-Middleware-Default-URL"
)
REROUTER_HEADER_REROUTED_URL = os.environ.get(
    "REROUTER_HEADER_REROUTED_URL", "X-ReRouter-Traefik-Middleware-ReRouted-URL"
)

FORWARD_ENABLED = os.getenv("FORWARD_ENABLED", "true").lower() == "true"
PROXY_TIMEOUT = int(os.getenv("PROXY_TIMEOUT", "300"))
# Where requests that were not rewritten go; empty rejects them with 421
REROUTER_UPSTREAM_URL = os.getenv("REROUTER_UPSTREAM_URL", "").rstrip("/")

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
