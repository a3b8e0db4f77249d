"""Transport tests."""

import httpx
import pytest
import requests

from acswrap.config import AcsWrapConfig, TransportConfig
from acswrap.contracts import HttpResponse, RequestOptions, WebResource
from acswrap.errors import TransportError
from acswrap.transports import get_transport
from acswrap.transports.httpx import HttpxTransport
from acswrap.transports.inmemory import InMemoryTransport
from acswrap.transports.requests import RequestsTransport


def make_request():
    web_resource = WebResource.post("WRAPv0.9/").with_raw_response(True)
    web_resource.add_optional_header("Content-Type", "application/x-www-form-urlencoded")
    request_options = RequestOptions(
        method="POST",
        path="/WRAPv0.9/",
        host="ns-sb.accesscontrol.windows.net",
        port=443,
        headers=dict(web_resource.headers),
    )
    return web_resource, request_options


def test_add_optional_header_keeps_caller_value():
    web_resource = WebResource.post("x")
    web_resource.headers["content-type"] = "text/plain"
    web_resource.add_optional_header("Content-Type", "application/x-www-form-urlencoded")

    assert web_resource.headers == {"content-type": "text/plain"}
    assert web_resource.ok_code == 200


def test_request_options_url():
    _, request_options = make_request()
    assert request_options.url == "https://ns-sb.accesscontrol.windows.net:443/WRAPv0.9/"


@pytest.mark.asyncio
async def test_inmemory_transport_records_and_replays():
    transport = InMemoryTransport(HttpResponse(status_code=200, body="ok"))
    web_resource, request_options = make_request()

    response = await transport.send(web_resource, request_options, "a=b", {"timeout": 1})

    assert response.body == "ok"
    assert transport.sent == [(web_resource, request_options, "a=b", {"timeout": 1})]


@pytest.mark.asyncio
async def test_inmemory_transport_rejects_unexpected_status():
    failure = HttpResponse(status_code=401, body="denied")
    transport = InMemoryTransport(failure)
    web_resource, request_options = make_request()

    with pytest.raises(TransportError) as excinfo:
        await transport.send(web_resource, request_options)

    assert excinfo.value.status_code == 401
    assert excinfo.value.response == failure


@pytest.mark.asyncio
async def test_httpx_transport_posts_form_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["host"] = request.url.host
        seen["path"] = request.url.path
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content
        return httpx.Response(200, text="wrap_access_token=abc")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpxTransport(client=client)
    web_resource, request_options = make_request()

    response = await transport.send(web_resource, request_options, "wrap_name=abc")
    await client.aclose()

    assert response.status_code == 200
    assert response.body == b"wrap_access_token=abc"
    assert seen == {
        "method": "POST",
        "host": "ns-sb.accesscontrol.windows.net",
        "path": "/WRAPv0.9/",
        "content_type": "application/x-www-form-urlencoded",
        "body": b"wrap_name=abc",
    }


@pytest.mark.asyncio
async def test_httpx_transport_attaches_error_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Error:Code:401", headers={"x-ms-request-id": "42"})

    async with HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler))) as transport:
        web_resource, request_options = make_request()
        with pytest.raises(TransportError) as excinfo:
            await transport.send(web_resource, request_options, "")

    assert excinfo.value.status_code == 401
    assert excinfo.value.response.body == b"Error:Code:401"
    assert excinfo.value.response.headers["x-ms-request-id"] == "42"


@pytest.mark.asyncio
async def test_httpx_transport_wraps_network_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpxTransport(client=client)
    web_resource, request_options = make_request()

    with pytest.raises(TransportError) as excinfo:
        await transport.send(web_resource, request_options, "")
    await client.aclose()

    assert excinfo.value.response is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


class FakeResponse:
    def __init__(self, status_code, text, headers=None):
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")
        self.headers = headers or {}


@pytest.mark.asyncio
async def test_requests_transport_sends_in_thread(monkeypatch):
    calls = []

    def fake_request(self, method, url, **kwargs):
        calls.append((method, url, kwargs))
        return FakeResponse(200, "wrap_access_token=abc")

    monkeypatch.setattr(requests.Session, "request", fake_request)
    transport = RequestsTransport(timeout=7.0)
    web_resource, request_options = make_request()

    response = await transport.send(web_resource, request_options, "wrap_name=abc", {"timeout": 2})
    await transport.aclose()

    assert response.body == b"wrap_access_token=abc"
    method, url, kwargs = calls[0]
    assert method == "POST"
    assert url == "https://ns-sb.accesscontrol.windows.net:443/WRAPv0.9/"
    assert kwargs["data"] == "wrap_name=abc"
    assert kwargs["timeout"] == 2
    assert kwargs["verify"] is True


@pytest.mark.asyncio
async def test_requests_transport_wraps_errors(monkeypatch):
    def fake_request(self, method, url, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(requests.Session, "request", fake_request)
    transport = RequestsTransport()
    web_resource, request_options = make_request()

    with pytest.raises(TransportError):
        await transport.send(web_resource, request_options, "")


def test_get_transport_uses_config(monkeypatch):
    monkeypatch.delenv("ACSWRAP_TRANSPORT", raising=False)
    config = AcsWrapConfig(transport=TransportConfig(backend="requests", timeout=3))

    transport = get_transport(config=config)
    assert isinstance(transport, RequestsTransport)
    assert transport.timeout == 3


def test_get_transport_env_override(monkeypatch):
    monkeypatch.setenv("ACSWRAP_TRANSPORT", "httpx")
    transport = get_transport(config=AcsWrapConfig())
    assert isinstance(transport, HttpxTransport)


def test_get_transport_unknown_backend():
    with pytest.raises(ValueError):
        get_transport("carrier-pigeon", config=AcsWrapConfig())


@pytest.mark.asyncio
async def test_httpx_transport_decodes_text_when_raw_not_requested():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="plain")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpxTransport(client=client)
    _, request_options = make_request()

    response = await transport.send(WebResource.post("x"), request_options)
    await client.aclose()

    assert response.body == "plain"


@pytest.mark.asyncio
async def test_httpx_transport_keeps_undecodable_bytes():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"wrap_access_token=ab\xff")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpxTransport(client=client)
    web_resource, request_options = make_request()

    response = await transport.send(web_resource, request_options, "")
    await client.aclose()

    assert response.body == b"wrap_access_token=ab\xff"


@pytest.mark.asyncio
async def test_requests_transport_honours_zero_timeout(monkeypatch):
    calls = []

    def fake_request(self, method, url, **kwargs):
        calls.append(kwargs)
        return FakeResponse(200, "wrap_access_token=abc")

    monkeypatch.setattr(requests.Session, "request", fake_request)
    transport = RequestsTransport(timeout=7.0)
    web_resource, request_options = make_request()

    await transport.send(web_resource, request_options, "", {"timeout": 0})
    await transport.send(web_resource, request_options, "")

    assert calls[0]["timeout"] == 0
    assert calls[1]["timeout"] == 7.0
