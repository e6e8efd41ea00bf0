"""
File client module.

This module handles client-side file transfer functionality: one QUIC
connection per file, one stream per connection, frame header followed by
the file content.
"""

import asyncio
import io
import ssl
from pathlib import Path
from typing import BinaryIO, Dict, Optional

from aioquic.asyncio import connect
from aioquic.asyncio.protocol import QuicConnectionProtocol
from aioquic.quic.configuration import QuicConfiguration
from aioquic.quic.events import ConnectionTerminated, QuicEvent, StreamDataReceived, StreamReset

from common.protocol_definitions import encode_header, display_name
from client.utils.config import ClientConfig
from client.utils.logger import logger


class TransferError(Exception):
    """Raised when the server aborts a transfer."""


class FileSenderProtocol(QuicConnectionProtocol):
    """Client protocol that reports when the server releases a stream."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._stream_done: Dict[int, asyncio.Future] = {}

    def stream_done(self, stream_id: int) -> asyncio.Future:
        """Future resolved with True on FIN, False on reset."""
        if stream_id not in self._stream_done:
            self._stream_done[stream_id] = asyncio.get_running_loop().create_future()
        return self._stream_done[stream_id]

    def quic_event_received(self, event: QuicEvent) -> None:
        super().quic_event_received(event)
        if isinstance(event, StreamDataReceived) and event.end_stream:
            self._resolve(event.stream_id, True)
        elif isinstance(event, StreamReset):
            self._resolve(event.stream_id, False)
        elif isinstance(event, ConnectionTerminated):
            for future in self._stream_done.values():
                if not future.done():
                    future.set_exception(ConnectionResetError(f"connection terminated: {event.reason_phrase}"))

    def _resolve(self, stream_id: int, finished: bool):
        future = self.stream_done(stream_id)
        if not future.done():
            future.set_result(finished)


class FileClient:
    """Client-side file transfer functionality."""

    def __init__(self, host: str = None, port: int = None):
        self.config = ClientConfig()
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port

    def _quic_configuration(self) -> QuicConfiguration:
        configuration = QuicConfiguration(is_client=True, alpn_protocols=self.config.alpn_protocols)
        if not self.config.verify_certificate:
            configuration.verify_mode = ssl.CERT_NONE
        return configuration

    async def send_file(self, file_path: str, name: Optional[str] = None) -> int:
        """Send a file from disk. The stored name defaults to the file's basename."""
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Not a file: {file_path}")

        filename = (name or path.name).encode('utf-8')
        with open(path, 'rb') as f:
            return await self._send(filename, f, path.stat().st_size)

    async def send_bytes(self, filename: bytes, payload: bytes) -> int:
        """Send an in-memory payload."""
        return await self._send(filename, io.BytesIO(payload), len(payload))

    async def _send(self, filename: bytes, source: BinaryIO, size: int) -> int:
        """Send one frame on a fresh connection and wait for the server to release the stream.

        ``source`` is read CHUNK_SIZE bytes at a time. Returns the number of
        payload bytes sent. Raises TransferError if the server aborted the
        stream, asyncio.TimeoutError if it never answered.
        """
        header = encode_header(filename)
        conn_info = self.config.get_connection_info()
        host, port = conn_info['host'], conn_info['port']
        file_settings = self.config.get_file_settings()
        shown_name = display_name(filename)
        bytes_sent = 0

        async with connect(
            host,
            port,
            configuration=self._quic_configuration(),
            create_protocol=FileSenderProtocol,
            wait_connected=True,
        ) as protocol:
            logger.log_connection(host, port, True)
            _, writer = await protocol.create_stream()
            stream_id = writer.get_extra_info('stream_id')
            done = protocol.stream_done(stream_id)

            logger.log_file_upload(shown_name, size)
            writer.write(header)
            while True:
                data = source.read(file_settings['chunk_size'])
                if not data:
                    break
                writer.write(data)
                bytes_sent += len(data)
                # let the connection transmit between chunks
                await asyncio.sleep(0)
            writer.write_eof()

            finished = await asyncio.wait_for(done, timeout=file_settings['transfer_timeout'])
            if not finished:
                raise TransferError(f"server aborted transfer of '{shown_name}'")

        logger.log_file_sent(shown_name, bytes_sent)
        return bytes_sent
