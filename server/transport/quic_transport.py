"""
QUIC transport module.

Adapts aioquic's event-driven protocol to the accept/read/close shape the
dispatcher works with:

    listener.accept()            -> QuicConnectionSession
    connection.accept_stream()   -> QuicStream
    stream.reader                -> asyncio.StreamReader
    stream.close() / abort()

A connection is handed out once its TLS handshake has completed, so peers
that fail ALPN negotiation never reach application code. Only the first
stream a peer opens on a connection is delivered; later streams are
ignored.
"""

import asyncio
import functools
from typing import Callable, Optional, Set

from aioquic.asyncio import serve
from aioquic.asyncio.protocol import QuicConnectionProtocol
from aioquic.asyncio.server import QuicServer
from aioquic.quic.configuration import QuicConfiguration
from aioquic.quic.connection import stream_is_unidirectional
from aioquic.quic.events import (
    ConnectionTerminated, HandshakeCompleted, QuicEvent, StreamDataReceived, StreamReset
)

from common.constants import STREAM_ERROR_ABORTED
from server.utils.logger import logger


class ListenerClosedError(Exception):
    """Raised by accept() once the listener has been closed."""


class QuicStream:
    """One peer-initiated stream, owned by a single handling task."""

    def __init__(self, session: 'QuicConnectionSession', stream_id: int):
        self.session = session
        self.stream_id = stream_id
        self.reader = asyncio.StreamReader()
        self.ended = False  # peer sent FIN
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def conn_id(self) -> str:
        return f"{self.session.conn_id}/{self.stream_id}"

    def close(self):
        """Finish our side of the stream after a successful transfer."""
        if self._released:
            return
        self._released = True
        self.session.finish_stream(self.stream_id)

    def abort(self):
        """Reset our side of the stream after a failed transfer."""
        if self._released:
            return
        self._released = True
        self.session.abort_stream(self.stream_id)


class QuicConnectionSession(QuicConnectionProtocol):
    """Server-side QUIC connection delivering a single stream."""

    def __init__(self, *args, on_handshake: Optional[Callable[['QuicConnectionSession'], None]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._on_handshake = on_handshake
        self._handshake_done = False
        self._stream: Optional[QuicStream] = None
        self._ignored_streams: Set[int] = set()
        self._first_stream = asyncio.get_running_loop().create_future()

    @property
    def conn_id(self) -> str:
        return self._quic.host_cid.hex()

    async def accept_stream(self) -> QuicStream:
        """Wait for the peer to open its stream.

        Raises ConnectionError if the connection ends first.
        """
        return await self._first_stream

    def finish_stream(self, stream_id: int):
        if not stream_is_unidirectional(stream_id):
            self._quic.send_stream_data(stream_id, b"", end_stream=True)
        self.transmit()

    def abort_stream(self, stream_id: int, error_code: int = STREAM_ERROR_ABORTED):
        # ask the peer to stop sending, then reset our send side
        self._quic.stop_stream(stream_id, error_code)
        if not stream_is_unidirectional(stream_id):
            self._quic.reset_stream(stream_id, error_code)
        self.transmit()

    def quic_event_received(self, event: QuicEvent) -> None:
        if isinstance(event, HandshakeCompleted):
            if not self._handshake_done:
                self._handshake_done = True
                if self._on_handshake:
                    self._on_handshake(self)
        elif isinstance(event, StreamDataReceived):
            self._stream_data_received(event)
        elif isinstance(event, StreamReset):
            if self._stream is not None and event.stream_id == self._stream.stream_id and not self._stream.ended:
                self._stream.reader.set_exception(
                    ConnectionResetError(f"stream reset by peer (error code {event.error_code})")
                )
        elif isinstance(event, ConnectionTerminated):
            self._connection_terminated(event)

    def _stream_data_received(self, event: StreamDataReceived):
        if self._stream is None:
            self._stream = QuicStream(self, event.stream_id)
            if not self._first_stream.done():
                self._first_stream.set_result(self._stream)
        elif event.stream_id != self._stream.stream_id:
            if event.stream_id not in self._ignored_streams:
                self._ignored_streams.add(event.stream_id)
                logger.warning(f"Ignoring extra stream {event.stream_id} on connection {self.conn_id}")
            return
        elif self._stream.released:
            return

        if event.data:
            self._stream.reader.feed_data(event.data)
        if event.end_stream:
            self._stream.ended = True
            self._stream.reader.feed_eof()

    def _connection_terminated(self, event: ConnectionTerminated):
        error = ConnectionResetError(
            f"connection terminated: {event.reason_phrase or 'no reason'} (error code {event.error_code})"
        )
        if self._stream is not None and not self._stream.ended:
            self._stream.reader.set_exception(error)
        if not self._first_stream.done():
            if self._handshake_done:
                self._first_stream.set_exception(error)
            else:
                # never handed out, nobody awaits it
                self._first_stream.cancel()


class QuicListener:
    """Listening QUIC endpoint with a blocking accept()."""

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self._connections: asyncio.Queue = asyncio.Queue()
        self._server: Optional[QuicServer] = None
        self._closed = False

    @classmethod
    async def bind(cls, host: str, port: int, configuration: QuicConfiguration) -> 'QuicListener':
        """Bind the UDP socket; raises OSError if the address is unavailable."""
        listener = cls(host, port)
        listener._server = await serve(
            host,
            port,
            configuration=configuration,
            create_protocol=functools.partial(QuicConnectionSession, on_handshake=listener._enqueue),
        )
        return listener

    def _enqueue(self, connection: QuicConnectionSession):
        if not self._closed:
            self._connections.put_nowait(connection)

    async def accept(self) -> QuicConnectionSession:
        """Wait for the next connection that completed its handshake."""
        if self._closed:
            raise ListenerClosedError("listener closed")
        connection = await self._connections.get()
        if connection is None:
            raise ListenerClosedError("listener closed")
        return connection

    def close(self):
        if self._closed:
            return
        self._closed = True
        if self._server is not None:
            self._server.close()
        self._connections.put_nowait(None)
