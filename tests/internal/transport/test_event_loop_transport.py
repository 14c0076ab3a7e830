"""Tests for EventLoopTransport."""

import asyncio
import time

import httpx
import pytest
import respx

from jixi_sdk._internal.transport.base import TransportStrategy
from jixi_sdk._internal.transport.event_loop import EventLoopTransport
from jixi_sdk._internal.workflows.extract import coerce_string_result, make_decoder
from jixi_sdk._internal.workflows.models import Attachment, DispatchRequest

URL = "http://test/workflow"


def post(auth_token: str | None = "token") -> DispatchRequest:
    return DispatchRequest(url=URL, auth_token=auth_token, json_text='{"prompt":"hi"}')


async def run_one(transport: EventLoopTransport, request: DispatchRequest, decoder=coerce_string_result):
    results = []
    transport.submit(request, decoder, results.append)
    await transport.wait()
    assert results == []
    assert transport.relay.drain() == 1
    return results[0]


class TestEventLoopTransport:
    """Tests for EventLoopTransport."""

    def test_is_transport_strategy(self):
        """Should satisfy the TransportStrategy protocol."""
        assert isinstance(EventLoopTransport(), TransportStrategy)

    def test_submit_requires_running_loop(self):
        """Should refuse to schedule outside a running loop."""
        with pytest.raises(RuntimeError):
            EventLoopTransport().submit(post(), coerce_string_result, lambda r: None)

    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self):
        """Should deliver a decoded value through the relay."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, text='"https://cdn/x.png"'))
        transport = EventLoopTransport()
        try:
            result = await run_one(transport, post())
        finally:
            await transport.aclose()

        assert result.ok is True
        assert result.value == "https://cdn/x.png"
        sent = route.calls.last.request
        assert sent.headers["authorization"] == "Bearer token"
        assert sent.headers["content-type"] == "application/json"
        assert sent.content == b'{"prompt":"hi"}'

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error(self):
        """Should map non-2xx to a protocol failure like the threaded transport."""
        respx.post(URL).mock(return_value=httpx.Response(500, text="boom"))
        transport = EventLoopTransport()
        try:
            result = await run_one(transport, post())
        finally:
            await transport.aclose()

        assert result.ok is False
        assert result.error_kind == "protocol"
        assert result.status_code == 500
        assert "boom" in result.error_detail

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self):
        """Should map connection failures to a transport failure."""
        respx.post(URL).mock(side_effect=httpx.ConnectError("connection refused"))
        transport = EventLoopTransport()
        try:
            result = await run_one(transport, post())
        finally:
            await transport.aclose()

        assert result.ok is False
        assert result.error_kind == "transport"

    @pytest.mark.asyncio
    @respx.mock
    async def test_decode_error(self):
        """Should map an undecodable body to a decode failure."""
        respx.post(URL).mock(return_value=httpx.Response(200, text="not json"))
        transport = EventLoopTransport()
        try:
            result = await run_one(transport, post(), decoder=make_decoder(None))
        finally:
            await transport.aclose()

        assert result.ok is False
        assert result.error_kind == "decode"

    @pytest.mark.asyncio
    @respx.mock
    async def test_multipart(self):
        """Should send attachments as multipart form data."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, text="ok"))
        transport = EventLoopTransport()
        request = DispatchRequest(
            url=URL,
            auth_token="token",
            json_text='{"a":1}',
            attachment=Attachment(content=b"\x89PNG", file_name="in.png"),
        )
        try:
            result = await run_one(transport, request)
        finally:
            await transport.aclose()

        assert result.ok is True
        sent = route.calls.last.request
        assert sent.headers["content-type"].startswith("multipart/form-data")
        assert b'name="data"' in sent.content
        assert b'filename="in.png"' in sent.content
        assert b"\x89PNG" in sent.content

    @pytest.mark.asyncio
    @respx.mock
    async def test_many_in_flight(self):
        """Should deliver every completion in the order the tasks finished."""
        respx.post(URL).mock(return_value=httpx.Response(200, text="ok"))
        transport = EventLoopTransport()
        results = []
        try:
            for _ in range(5):
                transport.submit(post(), coerce_string_result, results.append)
            assert transport.in_flight == 5
            await transport.wait()
            assert transport.in_flight == 0
            assert transport.relay.drain() == 5
        finally:
            await transport.aclose()

        assert [r.value for r in results] == ["ok"] * 5

    @pytest.mark.asyncio
    async def test_aclose_releases_client(self):
        """Should close and drop the lazily created client."""
        transport = EventLoopTransport()
        client = transport._get_client()

        await transport.aclose()

        assert client.is_closed
        assert transport._client is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_slow_body_exceeds_deadline(self):
        """A body trickling in past the timeout should fail at the deadline."""

        async def trickle():
            for byte in b'{"urls":["A"]}':
                await asyncio.sleep(0.05)
                yield bytes([byte])

        respx.post(URL).mock(return_value=httpx.Response(200, content=trickle()))
        transport = EventLoopTransport()
        results = []
        started = time.monotonic()
        try:
            transport.submit(post(), coerce_string_result, results.append, timeout=0.2)
            await transport.wait()
            transport.relay.drain()
        finally:
            await transport.aclose()

        assert time.monotonic() - started < 0.6
        assert results[0].ok is False
        assert results[0].error_kind == "transport"
        assert "deadline" in results[0].error_detail


class TestEventLoopTransportClose:
    """Tests for closing with exchanges in flight."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_aclose_delivers_cancelled_exchange(self):
        """A slow exchange cut off by aclose should still reach its callback."""

        async def stall():
            await asyncio.sleep(5)
            yield b"late"

        respx.post(URL).mock(return_value=httpx.Response(200, content=stall()))
        transport = EventLoopTransport()
        results = []
        transport.submit(post(), coerce_string_result, results.append)
        await asyncio.sleep(0.05)

        await transport.aclose()

        assert transport.relay.drain() == 1
        assert results[0].ok is False
        assert results[0].error_kind == "transport"
        assert "cancelled" in results[0].error_detail

    @pytest.mark.asyncio
    async def test_aclose_before_exchange_starts(self):
        """A task cancelled before it ran should still reach its callback."""
        transport = EventLoopTransport()
        results = []
        transport.submit(post(), coerce_string_result, results.append)

        await transport.aclose()

        assert transport.relay.drain() == 1
        assert results[0].error_kind == "transport"
        assert transport.in_flight == 0
