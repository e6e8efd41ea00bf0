#!/usr/bin/env python3
"""
QUIC File Ingestion Server

Accepts QUIC connections, takes the first stream of each one, decodes the
filename header and writes the remaining stream bytes to
``<filename>_<YYYYMMDDHHMMSS>.txt``. Per-connection and per-stream failures
are logged and isolated; only startup failures are fatal.
"""

import asyncio
from typing import Optional, Set

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.protocol_definitions import FrameDecodeError, decode_header, display_name
from server.files.file_server import FileSink
from server.transport.quic_transport import ListenerClosedError, QuicListener
from server.utils.config import ServerConfig
from server.utils.credentials import generate_tls_config
from server.utils.logger import logger as default_logger


class FileTransferServer:
    """Connection dispatcher wiring the frame decoder to the file sink."""

    def __init__(self, host: str = None, port: int = None, output_dir: str = None, reporter=None):
        self.config = ServerConfig()
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port
        if output_dir is not None:
            self.config.output_dir = output_dir

        file_settings = self.config.get_file_settings()
        self.file_sink = FileSink(file_settings['output_dir'], file_settings['chunk_size'])
        self.logger = reporter or default_logger
        self.listener: Optional[QuicListener] = None
        self._tasks: Set[asyncio.Task] = set()

    async def start(self):
        """Provision credentials, bind the listener and serve forever.

        CredentialError and bind failures (OSError) propagate to the caller.
        """
        tls_settings = self.config.get_tls_settings()
        configuration = generate_tls_config(
            alpn_protocols=tls_settings['alpn_protocols'],
            validity_hours=tls_settings['validity_hours'],
            idle_timeout=tls_settings['idle_timeout'],
        )

        conn_info = self.config.get_connection_info()
        self.listener = await QuicListener.bind(conn_info['host'], conn_info['port'], configuration)
        self.logger.log_listening(conn_info['host'], conn_info['port'], ', '.join(tls_settings['alpn_protocols']))

        await self.serve(self.listener)

    async def serve(self, listener):
        """Accept connections until the listener is closed."""
        while True:
            try:
                connection = await listener.accept()
            except ListenerClosedError:
                self.logger.info("Listener closed, no longer accepting connections")
                break
            except Exception as e:
                self.logger.error(f"Failed to accept connection: {e}")
                continue

            task = asyncio.create_task(self.handle_connection(connection))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def handle_connection(self, connection):
        """Wait for the connection's stream and hand it to handle_stream."""
        conn_id = connection.conn_id
        self.logger.log_connection(conn_id)

        try:
            stream = await connection.accept_stream()
        except ConnectionError as e:
            self.logger.log_transfer_failed("accept stream", conn_id, e)
            return

        await self.handle_stream(stream)

    async def handle_stream(self, stream) -> bool:
        """Receive one file from one stream. Returns True on success."""
        conn_id = stream.conn_id

        try:
            filename = await decode_header(stream.reader)
        except FrameDecodeError as e:
            self.logger.log_transfer_failed("read filename", conn_id, e)
            stream.abort()
            return False

        name = display_name(filename)

        try:
            handle = await self.file_sink.create(filename)
        except (OSError, ValueError) as e:
            self.logger.log_transfer_failed(f"create file for '{name}'", conn_id, e)
            stream.abort()
            return False

        path = self.file_sink.display_path(handle)
        try:
            self.logger.log_file_receiving(name, path, conn_id)
            size = await self.file_sink.write(handle, stream.reader)
        except OSError as e:
            self.logger.log_transfer_failed(f"receive file '{name}'", conn_id, e)
            stream.abort()
            return False
        finally:
            self.file_sink.close(handle)

        stream.close()
        self.logger.log_file_received(name, path, size, conn_id)
        return True

    def close(self):
        """Stop accepting connections."""
        if self.listener is not None:
            self.listener.close()


import argparse

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='QUIC File Ingestion Server')
    parser.parse_args()

    try:
        asyncio.run(FileTransferServer().start())
    except KeyboardInterrupt:
        default_logger.info("Server shutting down...")
    except Exception as e:
        default_logger.log_error("server startup", e)
        sys.exit(1)
