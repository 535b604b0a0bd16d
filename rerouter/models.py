from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict
from starlette.datastructures import Headers


class RequestURL(BaseModel):
    """Absolute request URL as seen by the middleware: scheme, host, raw path and query."""

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    raw_path: str = ""
    query: str = ""

    def __str__(self) -> str:
        url = f"{self.scheme}://{self.host}{self.raw_path}"
        if self.query:
            url = f"{url}?{self.query}"
        return url

    @property
    def path_without_slash(self) -> str:
        return self.raw_path.removeprefix("/")

    @classmethod
    def from_string(cls, raw: str) -> "RequestURL":
        parts = urlsplit(raw)
        return cls(
            scheme=parts.scheme,
            host=parts.netloc,
            raw_path=parts.path,
            query=parts.query,
        )

    @classmethod
    def from_scope(cls, scope: dict) -> "RequestURL":
        """Build the URL of an ASGI HTTP scope, preferring the raw request target."""
        host = Headers(raw=scope.get("headers") or []).get("host", "")
        if not host:
            server = scope.get("server")
            if server:
                server_host, server_port = server
                host = server_host if server_port is None else f"{server_host}:{server_port}"
            else:
                host = ""

        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.decode("latin-1")
            # raw_path may carry the query string depending on the server
            path = path.split("?", 1)[0]
        else:
            path = scope.get("path", "")

        return cls(
            scheme=scope.get("scheme", "http"),
            host=host,
            raw_path=path,
            query=(scope.get("query_string") or b"").decode("latin-1"),
        )
