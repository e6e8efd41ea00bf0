"""
Protocol definitions for the QUIC file ingestion system.

Every stream carries exactly one frame:

    byte[0]      filename length N (0-255, unsigned)
    byte[1..N]   filename, raw bytes
    byte[N+1..]  file content, until the peer ends the stream

The length byte is authoritative. The filename is never scanned for a
terminator, so any byte value may appear in it, and it is never sanitized.
"""

import asyncio

from common.constants import FILENAME_LENGTH_SIZE, MAX_FILENAME_LENGTH


class FrameDecodeError(Exception):
    """Raised when a frame header cannot be read in full."""


async def decode_header(reader: asyncio.StreamReader) -> bytes:
    """Read the filename header from the start of a stream.

    Returns the raw filename bytes and leaves ``reader`` positioned at the
    first payload byte. Raises FrameDecodeError if the stream ends or fails
    before the length byte or the full filename has arrived.
    """
    try:
        length_byte = await reader.readexactly(FILENAME_LENGTH_SIZE)
    except asyncio.IncompleteReadError as e:
        raise FrameDecodeError("stream ended before filename length") from e
    except ConnectionError as e:
        raise FrameDecodeError(f"failed to read filename length: {e}") from e

    length = length_byte[0]

    try:
        return await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise FrameDecodeError(
            f"stream ended after {len(e.partial)} of {length} filename bytes"
        ) from e
    except ConnectionError as e:
        raise FrameDecodeError(f"failed to read filename: {e}") from e


def encode_header(filename: bytes) -> bytes:
    """Build the frame header for a filename."""
    if len(filename) > MAX_FILENAME_LENGTH:
        raise ValueError(f"filename too long: {len(filename)} bytes (max: {MAX_FILENAME_LENGTH})")
    return bytes([len(filename)]) + filename


def display_name(filename: bytes) -> str:
    """Filename for log lines; undecodable bytes are escaped."""
    return filename.decode('utf-8', errors='backslashreplace')
