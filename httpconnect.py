import asyncio
import logging
from enum import Enum
from typing import NamedTuple, Optional

from httperrors import CurlError, ErrorKind
from httprequest import DEFAULT_PORTS

logger = logging.getLogger(__name__)

DELIMITER = "\r\n\r\n"


def port_for_scheme(scheme):
    """Conventional port for a scheme; https still speaks plaintext"""
    return DEFAULT_PORTS[scheme]


class ResponseFrame(NamedTuple):
    headers: str
    body: str


class ResponseHandler:
    """Splits each inbound chunk into header and body text and logs them.

    Every chunk is handled on its own, so a response spread over several
    TCP segments is logged piecewise.
    """

    def __init__(self, log=logger):
        self.log = log

    def on_data(self, chunk: bytes) -> ResponseFrame:
        text = chunk.decode("utf-8", errors="replace")
        headers, _, body = text.partition(DELIMITER)
        self.log.debug(headers)
        self.log.info(body)
        return ResponseFrame(headers, body)


class ConnectionState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERRORED = "errored"


class CurlProtocol(asyncio.Protocol):
    """One request/response exchange over a single TCP connection"""

    def __init__(self, request: bytes, handler: ResponseHandler, done: asyncio.Future, log=logger):
        self.request = request
        self.handler = handler
        self.done = done
        self.log = log
        self.transport: Optional[asyncio.Transport] = None
        self.state = ConnectionState.IDLE

    def connection_made(self, transport):
        self.transport = transport
        self.state = ConnectionState.OPEN
        transport.write(self.request)

    def data_received(self, data):
        self.handler.on_data(data)

    def connection_lost(self, exc):
        if exc is None:
            self.state = ConnectionState.CLOSED
            if not self.done.done():
                self.done.set_result(self.state)
            return

        self.state = ConnectionState.ERRORED
        self.log.error(f"Error: {exc}")
        self.transport.close()
        self.state = ConnectionState.CLOSED
        if not self.done.done():
            error = CurlError(ErrorKind.SOCKET_CONNECTION, str(exc))
            error.__cause__ = exc
            self.done.set_exception(error)


async def open_connection(host, port, request: bytes, handler: Optional[ResponseHandler] = None, log=logger):
    """Connect, write `request` once connected, and stream the reply to `handler`.

    Returns the final ConnectionState once the peer closes. Any transport
    failure, including failing to connect at all, raises
    CurlError(SOCKET_CONNECTION) after the socket has been closed.
    """
    loop = asyncio.get_running_loop()
    done = loop.create_future()
    protocol = CurlProtocol(request, handler or ResponseHandler(log), done, log)
    protocol.state = ConnectionState.CONNECTING
    try:
        await loop.create_connection(lambda: protocol, host, port)
    except OSError as e:
        protocol.state = ConnectionState.CLOSED
        log.error(f"Error: {e}")
        raise CurlError(ErrorKind.SOCKET_CONNECTION, str(e)) from e
    return await done
