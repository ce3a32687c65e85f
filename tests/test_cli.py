import asyncio
import json
import socket
import threading

import pytest
import websockets

from resolink.cli import main
from resolink.data_model import Field, Slot
from resolink.messages import GetSlot, MessageWrapper
from resolink.responses import Response, SlotData


@pytest.fixture
def link_server():
    received = []
    state = {}
    ready = threading.Event()

    async def handler(ws, *_):
        async for raw in ws:
            wrapper = MessageWrapper.from_json(json.loads(raw))
            received.append(wrapper.inner)
            response = Response(
                success=True,
                kind=SlotData(depth=3, data=Slot(id="Root", name=Field("n", "Root"))),
                source_message_id=wrapper.message_id,
            )
            await ws.send(json.dumps(response.to_json()))

    async def serve():
        async with websockets.serve(handler, "127.0.0.1", 0) as server:
            state["port"] = next(iter(server.sockets)).getsockname()[1]
            state["stop"] = asyncio.get_running_loop().create_future()
            ready.set()
            await state["stop"]

    def run():
        loop = asyncio.new_event_loop()
        state["loop"] = loop
        loop.run_until_complete(serve())
        loop.close()

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    assert ready.wait(5)
    yield f"ws://127.0.0.1:{state['port']}", received
    state["loop"].call_soon_threadsafe(state["stop"].set_result, None)
    thread.join(5)


def unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_missing_url_prints_usage(capsys):
    assert main([]) == 0
    assert "The first argument must be the url to connect to." in capsys.readouterr().out


def test_reads_root_slot(link_server, capsys):
    url, received = link_server
    assert main([url]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert received == [GetSlot(slot_id="Root", depth=3, include_component_data=True)]
    assert printed["$type"] == "slotData"
    assert printed["success"] is True
    parsed = Response.from_json(printed)
    assert parsed.kind.data.is_root_slot()
    assert parsed.kind.data.id == "Root"


def test_connection_failure_reports_error(capsys):
    assert main([f"ws://127.0.0.1:{unused_port()}"]) == 1
    assert "failed to connect to server" in capsys.readouterr().err