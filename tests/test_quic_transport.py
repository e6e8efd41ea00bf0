#!/usr/bin/env python3
"""
Unit tests for the QUIC adapter in server/transport/quic_transport.py

Drives QuicConnectionSession with aioquic events directly:
- Handshake hands the connection to the listener once
- Only the first stream is delivered
- Peer reset and connection loss fail pending reads
- Abort stops the peer and drops later data
"""

import asyncio
import unittest
from unittest.mock import Mock, patch

# Import from the project root
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aioquic.quic.events import ConnectionTerminated, HandshakeCompleted, StreamDataReceived, StreamReset

from server.transport.quic_transport import QuicConnectionSession


def handshake_completed():
    return HandshakeCompleted(alpn_protocol="quic-file-transfer", early_data_accepted=False, session_resumed=False)


def data_received(stream_id: int, data: bytes, end_stream: bool = False):
    return StreamDataReceived(data=data, end_stream=end_stream, stream_id=stream_id)


class TestQuicConnectionSession(unittest.IsolatedAsyncioTestCase):
    """Test cases for QuicConnectionSession."""

    async def asyncSetUp(self):
        self.quic = Mock()
        self.quic.host_cid = b"\x01\x02\x03\x04"
        self.accepted = []
        self.session = QuicConnectionSession(self.quic, on_handshake=self.accepted.append)
        self.session.transmit = Mock()

    async def test_handshake_hands_out_connection_once(self):
        self.session.quic_event_received(handshake_completed())
        self.session.quic_event_received(handshake_completed())

        self.assertEqual(self.accepted, [self.session])
        self.assertEqual(self.session.conn_id, "01020304")

    async def test_first_stream_is_delivered(self):
        self.session.quic_event_received(handshake_completed())
        self.session.quic_event_received(data_received(0, b"\x01a", end_stream=False))
        self.session.quic_event_received(data_received(0, b"payload", end_stream=True))

        stream = await asyncio.wait_for(self.session.accept_stream(), timeout=1)

        self.assertEqual(stream.stream_id, 0)
        self.assertEqual(stream.conn_id, "01020304/0")
        self.assertEqual(await stream.reader.read(), b"\x01apayload")

    async def test_extra_stream_is_ignored(self):
        with patch('server.transport.quic_transport.logger') as mock_logger:
            self.session.quic_event_received(data_received(0, b"\x01a"))
            self.session.quic_event_received(data_received(4, b"\x01bother", end_stream=True))
            self.session.quic_event_received(data_received(4, b"more"))
            self.session.quic_event_received(data_received(0, b"first", end_stream=True))

            mock_logger.warning.assert_called_once()

        stream = await self.session.accept_stream()
        self.assertEqual(stream.stream_id, 0)
        self.assertEqual(await stream.reader.read(), b"\x01afirst")

    async def test_peer_reset_fails_pending_read(self):
        self.session.quic_event_received(data_received(0, b"\x01a"))
        stream = await self.session.accept_stream()
        self.assertEqual(await stream.reader.read(2), b"\x01a")

        self.session.quic_event_received(StreamReset(error_code=7, stream_id=0))

        with self.assertRaises(ConnectionResetError):
            await stream.reader.read(100)

    async def test_reset_after_fin_keeps_data(self):
        self.session.quic_event_received(data_received(0, b"\x01acomplete", end_stream=True))
        self.session.quic_event_received(StreamReset(error_code=7, stream_id=0))

        stream = await self.session.accept_stream()
        self.assertEqual(await stream.reader.read(), b"\x01acomplete")

    async def test_connection_terminated_before_stream(self):
        self.session.quic_event_received(handshake_completed())
        self.session.quic_event_received(
            ConnectionTerminated(error_code=0, frame_type=None, reason_phrase="bye")
        )

        with self.assertRaises(ConnectionError):
            await self.session.accept_stream()

    async def test_connection_terminated_mid_stream(self):
        self.session.quic_event_received(data_received(0, b"\x01a"))
        stream = await self.session.accept_stream()
        await stream.reader.read(2)

        self.session.quic_event_received(
            ConnectionTerminated(error_code=0, frame_type=None, reason_phrase="gone")
        )

        with self.assertRaises(ConnectionResetError):
            await stream.reader.read(100)

    async def test_abort_stops_peer_and_drops_later_data(self):
        self.session.quic_event_received(data_received(0, b"abc"))
        stream = await self.session.accept_stream()

        stream.abort()
        self.session.quic_event_received(data_received(0, b"x" * 65536))
        self.session.quic_event_received(data_received(0, b"xyz", end_stream=True))

        self.quic.stop_stream.assert_called_once_with(0, 1)
        self.quic.reset_stream.assert_called_once_with(0, 1)
        self.assertTrue(stream.released)
        self.assertEqual(await stream.reader.read(100), b"abc")
        self.assertFalse(stream.reader.at_eof())

    async def test_abort_unidirectional_stream(self):
        self.session.quic_event_received(data_received(2, b"abc"))
        stream = await self.session.accept_stream()

        stream.abort()

        self.quic.stop_stream.assert_called_once_with(2, 1)
        self.quic.reset_stream.assert_not_called()

    async def test_close_finishes_stream_once(self):
        self.session.quic_event_received(data_received(0, b"\x00", end_stream=True))
        stream = await self.session.accept_stream()

        stream.close()
        stream.abort()

        self.quic.send_stream_data.assert_called_once_with(0, b"", end_stream=True)
        self.quic.stop_stream.assert_not_called()
        self.quic.reset_stream.assert_not_called()


if __name__ == '__main__':
    unittest.main()
