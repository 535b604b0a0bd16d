import pytest

from rerouter.config import ReRouterConfig
from rerouter.models import RequestURL


@pytest.fixture
def config():
    """Default middleware configuration, independent of the environment."""
    return ReRouterConfig()


@pytest.fixture
def make_url():
    def _make_url(host, raw_path="/", scheme="https", query=""):
        return RequestURL(scheme=scheme, host=host, raw_path=raw_path, query=query)

    return _make_url
