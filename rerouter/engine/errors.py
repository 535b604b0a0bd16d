from typing import Any, Dict, Optional


class RerouterError(Exception):
    """Base class for failures of the rewrite engine."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class ClassificationError(RerouterError):
    """The hostname is too shallow or malformed for the positional alias rules."""

    def __init__(self, message: str, hostname: str, labels=None):
        super().__init__(
            message, {"hostname": hostname, "labels": list(labels or [])}
        )
        self.hostname = hostname


class RewriteError(RerouterError):
    """The constructed URL is not a valid absolute URI."""

    def __init__(self, message: str, old_url: str, new_url: str, reason: str = ""):
        super().__init__(
            message, {"old_url": old_url, "new_url": new_url, "reason": reason}
        )
        self.old_url = old_url
        self.new_url = new_url
        self.reason = reason
