from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from rerouter.proxy import route


@pytest.fixture(scope="module")
def app():
    from rerouter.server import app

    return app


def test_metrics_are_not_rerouted(app):
    client = TestClient(app, base_url="http://localhost")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "rerouter_app_info" in response.text


def test_misdirected_request(app):
    client = TestClient(app, base_url="http://a.b")

    response = client.get("/anything")

    assert response.status_code == 421
    assert "a.b" in response.text


def test_alias_is_forwarded_to_github(app):
    upstream = Mock(spec=httpx.Response)
    upstream.status_code = 200
    upstream.headers = httpx.Headers({"content-type": "text/plain"})

    async def aiter_raw():
        yield b"ok"

    upstream.aiter_raw = aiter_raw
    upstream.aclose = AsyncMock()

    client_mock = Mock()
    client_mock.build_request = Mock(return_value=Mock())
    client_mock.send = AsyncMock(return_value=upstream)
    client_mock.aclose = AsyncMock()

    with patch("rerouter.proxy.route.httpx.AsyncClient", return_value=client_mock):
        client = TestClient(app, base_url="https://gh.someone.tl")
        response = client.get("/repo/file.go")

    assert response.status_code == 200
    assert response.text == "ok"
    kwargs = client_mock.build_request.call_args.kwargs
    assert kwargs["url"] == "https://github.com/someone/repo/file.go"
    assert kwargs["headers"]["host"] == "github.com"
    assert (
        kwargs["headers"]["x-rerouter-traefik-middleware-default-url"]
        == "https://gh.someone.tl/repo/file.go"
    )


def test_passthrough_host_is_not_forwarded_to_itself(app, monkeypatch):
    monkeypatch.setattr(route.settings, "REROUTER_UPSTREAM_URL", "")
    client_mock = Mock()

    with patch("rerouter.proxy.route.httpx.AsyncClient", return_value=client_mock):
        client = TestClient(app, base_url="http://169.254.169.254")
        response = client.get("/latest/meta-data")

    assert response.status_code == 421
    client_mock.build_request.assert_not_called()


def test_passthrough_host_goes_to_configured_upstream(app, monkeypatch):
    monkeypatch.setattr(
        route.settings, "REROUTER_UPSTREAM_URL", "http://traefik.internal:8080"
    )
    upstream = Mock(spec=httpx.Response)
    upstream.status_code = 204
    upstream.headers = httpx.Headers({})

    async def aiter_raw():
        return
        yield

    upstream.aiter_raw = aiter_raw
    upstream.aclose = AsyncMock()

    client_mock = Mock()
    client_mock.build_request = Mock(return_value=Mock())
    client_mock.send = AsyncMock(return_value=upstream)
    client_mock.aclose = AsyncMock()

    with patch("rerouter.proxy.route.httpx.AsyncClient", return_value=client_mock):
        client = TestClient(app, base_url="http://169.254.169.254")
        response = client.get("/latest/meta-data")

    assert response.status_code == 204
    kwargs = client_mock.build_request.call_args.kwargs
    assert kwargs["url"] == "http://traefik.internal:8080/latest/meta-data"


class TestFilteringSpanExporter:
    @staticmethod
    def _span(attributes):
        span = Mock()
        span.attributes = attributes
        return span

    @pytest.fixture
    def inner(self):
        exporter = Mock(spec=SpanExporter)
        exporter.export.return_value = SpanExportResult.SUCCESS
        return exporter

    def test_body_spans_are_dropped(self, inner):
        from rerouter.server import FilteringSpanExporter

        request_span = self._span({"http.method": "GET"})
        body_span = self._span({"asgi.event.type": "http.response.body"})
        start_span = self._span({"asgi.event.type": "http.response.start"})
        bare_span = self._span(None)

        result = FilteringSpanExporter(inner).export(
            [request_span, body_span, start_span, bare_span]
        )

        assert result == SpanExportResult.SUCCESS
        inner.export.assert_called_once_with([request_span, start_span, bare_span])

    def test_batch_of_only_body_spans_is_not_exported(self, inner):
        from rerouter.server import FilteringSpanExporter

        body_span = self._span({"asgi.event.type": "http.response.body"})

        result = FilteringSpanExporter(inner).export([body_span, body_span])

        assert result == SpanExportResult.SUCCESS
        inner.export.assert_not_called()

    def test_inner_failure_is_returned(self, inner):
        from rerouter.server import FilteringSpanExporter

        inner.export.return_value = SpanExportResult.FAILURE

        result = FilteringSpanExporter(inner).export([self._span({})])

        assert result == SpanExportResult.FAILURE

    def test_shutdown_and_flush_are_delegated(self, inner):
        from rerouter.server import FilteringSpanExporter

        exporter = FilteringSpanExporter(inner)
        exporter.shutdown()
        exporter.force_flush(500)

        inner.shutdown.assert_called_once_with()
        inner.force_flush.assert_called_once_with(500)
