"""Asynchronous client for the link protocol over a websocket."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging

import websockets
import websockets.exceptions as ws_exceptions

from resolink.ids import IdGenerator
from resolink.messages import MessageWrapper
from resolink.responses import FallbackResponse, Response

log = logging.getLogger(__name__)


class ClientError(Exception):
    """Base class of every error the client raises."""


class FailureToConnect(ClientError):
    """The websocket connection could not be opened."""

    def __init__(self, cause):
        super().__init__(f"failed to connect to server {cause}")
        self.cause = cause


class ConnectionClosed(ClientError):
    """The connection is closed, so no response will arrive."""

    def __init__(self):
        super().__init__("socket connection is closed")


class MessageRenderingError(ClientError):
    """An outbound message could not be encoded."""

    def __init__(self, cause):
        super().__init__(f"outbound message is invalid {cause}")
        self.cause = cause


class MessageParsingError(ClientError):
    """A response arrived for a request but its body could not be decoded."""

    def __init__(self, cause):
        super().__init__(f"inbound message is invalid {cause}")
        self.cause = cause


class Client:
    """A connection that sends messages and pairs each with its response."""

    def __init__(self, connection, id_prefix=None):
        self._ws = connection
        self._ids = IdGenerator(id_prefix)
        self._pending = {}
        self._closed = False
        self._reader = asyncio.get_running_loop().create_task(self._read_loop())

    @classmethod
    async def connect(cls, address, id_prefix=None):
        """Open a connection to ``address``; IDs use ``id_prefix`` or a random one."""
        try:
            connection = await websockets.connect(address, max_size=None)
        except (OSError, ws_exceptions.WebSocketException, asyncio.TimeoutError) as exc:
            raise FailureToConnect(exc) from exc
        return cls(connection, id_prefix)

    async def send(self, message):
        """Send ``message`` and wait for the response paired with it."""
        if self._closed:
            raise ConnectionClosed()
        message_id = self._ids.next()
        try:
            payload = json.dumps(
                MessageWrapper(inner=message, message_id=message_id).to_json(),
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise MessageRenderingError(exc) from exc

        future = asyncio.get_running_loop().create_future()
        self._pending[message_id] = future
        try:
            try:
                await self._ws.send(payload)
            except ws_exceptions.ConnectionClosed as exc:
                raise ConnectionClosed() from exc
            return await future
        finally:
            self._pending.pop(message_id, None)

    def is_closed(self):
        """Whether the client was closed or its connection was lost."""
        return self._closed

    async def close(self):
        """Close the connection; requests still waiting fail with ConnectionClosed."""
        self._closed = True
        try:
            await self._ws.close()
        except ws_exceptions.WebSocketException as exc:
            log.error("failed to close connection: %s", exc)
        self._reader.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._reader
        self._fail_pending()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _read_loop(self):
        try:
            async for raw in self._ws:
                self._dispatch(raw)
        except ws_exceptions.ConnectionClosed:
            pass
        finally:
            self._closed = True
            self._fail_pending()

    def _fail_pending(self):
        pending, self._pending = self._pending, {}
        for future in pending.values():
            if not future.done():
                future.set_exception(ConnectionClosed())

    def _dispatch(self, raw):
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = bytes(raw).decode("utf-8")
            except UnicodeDecodeError:
                log.warning("Message from server was not valid UTF-8 text, ignoring it.")
                return
        try:
            data = json.loads(raw)
        except ValueError as exc:
            log.warning("Message from server was not JSON, ignoring it: %s", exc)
            return

        try:
            response = Response.from_json(data)
            message_id, outcome = response.source_message_id, response
        except (ValueError, TypeError) as exc:
            try:
                fallback = FallbackResponse.from_json(data)
            except (ValueError, TypeError):
                log.warning(
                    "Message from server was not parsed successfully, and the fallback "
                    "also failed. The request will never complete. %s",
                    exc,
                )
                return
            message_id, outcome = fallback.source_message_id, MessageParsingError(exc)

        if message_id is None:
            return
        future = self._pending.pop(message_id, None)
        if future is None:
            log.warning("Unpaired outbound message: %r", outcome)
            return
        if future.done():
            return
        if isinstance(outcome, ClientError):
            future.set_exception(outcome)
        else:
            future.set_result(outcome)