import asyncio
import contextlib
import json
import socket

import pytest
import websockets

from resolink.client import (
    Client,
    ConnectionClosed,
    FailureToConnect,
    MessageParsingError,
    MessageRenderingError,
)
from resolink.messages import GetSlot, MessageWrapper
from resolink.responses import GenericResult, Response


@contextlib.asynccontextmanager
async def serving(handler):
    async with websockets.serve(handler, "127.0.0.1", 0) as server:
        port = next(iter(server.sockets)).getsockname()[1]
        yield f"ws://127.0.0.1:{port}"


def echo_handler(canned_responses, received):
    async def handler(ws, *_):
        for response in canned_responses:
            wrapper = MessageWrapper.from_json(json.loads(await ws.recv()))
            response.source_message_id = wrapper.message_id
            received.append(wrapper)
            await ws.send(json.dumps(response.to_json()))

    return handler


def make_response(kind):
    return Response(success=False, kind=kind, source_message_id=None, error_info=None)


def make_error_response(error_info):
    return Response(
        success=True, kind=GenericResult(), source_message_id=None, error_info=error_info
    )


def unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def root_request():
    return GetSlot(slot_id="ROOT", depth=1, include_component_data=False)


@pytest.mark.asyncio
async def test_ctor_success():
    received = []
    handler = echo_handler(
        [make_response(GenericResult()), make_error_response("Bad things!")], received
    )
    async with serving(handler) as url:
        client = await Client.connect(url)
        responses = [await client.send(root_request()), await client.send(root_request())]
        await client.close()

    assert [wrapper.inner for wrapper in received] == [root_request(), root_request()]
    for response in responses:
        response.source_message_id = None
    assert responses == [make_response(GenericResult()), make_error_response("Bad things!")]


@pytest.mark.asyncio
async def test_id_prefix_is_used_for_message_ids():
    received = []
    handler = echo_handler([make_response(GenericResult()), make_response(GenericResult())], received)
    async with serving(handler) as url:
        client = await Client.connect(url, "TEST")
        first = await client.send(root_request())
        second = await client.send(root_request())
        await client.close()

    assert [wrapper.message_id for wrapper in received] == ["RS_REPL_TEST_0", "RS_REPL_TEST_1"]
    assert first.source_message_id == "RS_REPL_TEST_0"
    assert second.source_message_id == "RS_REPL_TEST_1"


@pytest.mark.asyncio
async def test_responses_out_of_order_are_paired_by_id():
    async def handler(ws, *_):
        wrappers = [MessageWrapper.from_json(json.loads(await ws.recv())) for _ in range(2)]
        for wrapper in reversed(wrappers):
            response = Response(
                success=True,
                source_message_id=wrapper.message_id,
                error_info=wrapper.inner.slot_id,
            )
            await ws.send(json.dumps(response.to_json()))
        await ws.wait_closed()

    async with serving(handler) as url:
        client = await Client.connect(url)
        first, second = await asyncio.gather(
            client.send(GetSlot("A", 0, False)), client.send(GetSlot("B", 0, False))
        )
        await client.close()

    assert first.error_info == "A"
    assert second.error_info == "B"


@pytest.mark.asyncio
async def test_garbage_and_unpaired_messages_are_ignored():
    async def handler(ws, *_):
        wrapper = MessageWrapper.from_json(json.loads(await ws.recv()))
        await ws.send("not json")
        await ws.send(b"\xff\xfe")
        await ws.send(json.dumps({"$type": "response", "sourceMessageId": "elsewhere", "success": True}))
        await ws.send(json.dumps({"unrelated": 1}))
        reply = Response(success=True, source_message_id=wrapper.message_id, error_info="ok")
        await ws.send(json.dumps(reply.to_json()))
        await ws.wait_closed()

    async with serving(handler) as url:
        client = await Client.connect(url)
        response = await client.send(root_request())
        await client.close()

    assert response.error_info == "ok"
    assert response.success is True


@pytest.mark.asyncio
async def test_unreadable_body_with_id_raises_parsing_error():
    async def handler(ws, *_):
        wrapper = MessageWrapper.from_json(json.loads(await ws.recv()))
        await ws.send(
            json.dumps(
                {
                    "$type": "slotData",
                    "depth": "deep",
                    "sourceMessageId": wrapper.message_id,
                    "success": True,
                    "errorInfo": None,
                }
            )
        )
        await ws.wait_closed()

    async with serving(handler) as url:
        client = await Client.connect(url)
        with pytest.raises(MessageParsingError):
            await client.send(root_request())
        await client.close()


@pytest.mark.asyncio
async def test_unrenderable_message_raises_rendering_error():
    received = []

    async def handler(ws, *_):
        async for raw in ws:
            received.append(raw)

    async with serving(handler) as url:
        client = await Client.connect(url)
        with pytest.raises(MessageRenderingError):
            await client.send(GetSlot("Root", 2**40, False))
        await client.close()

    assert received == []


@pytest.mark.asyncio
async def test_close_marks_client_closed_and_rejects_sends():
    async def handler(ws, *_):
        await ws.wait_closed()

    async with serving(handler) as url:
        client = await Client.connect(url)
        assert client.is_closed() is False
        await client.close()
        assert client.is_closed() is True
        with pytest.raises(ConnectionClosed):
            await client.send(root_request())


@pytest.mark.asyncio
async def test_server_hangup_fails_pending_request():
    async def handler(ws, *_):
        await ws.recv()

    async with serving(handler) as url:
        client = await Client.connect(url)
        with pytest.raises(ConnectionClosed):
            await client.send(root_request())
        assert client.is_closed() is True
        await client.close()


@pytest.mark.asyncio
async def test_connect_to_nothing_raises_failure_to_connect():
    with pytest.raises(FailureToConnect) as info:
        await Client.connect(f"ws://127.0.0.1:{unused_port()}")
    assert str(info.value).startswith("failed to connect to server")


@pytest.mark.asyncio
async def test_connect_with_invalid_address_raises_failure_to_connect():
    with pytest.raises(FailureToConnect):
        await Client.connect("not a websocket address")


def test_error_messages():
    assert str(ConnectionClosed()) == "socket connection is closed"
    assert str(MessageRenderingError("x")) == "outbound message is invalid x"
    assert str(MessageParsingError("y")) == "inbound message is invalid y"