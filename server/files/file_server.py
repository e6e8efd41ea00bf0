"""
File server module.

This module turns decoded frames into files on disk. File creation is
serialized by one process-wide lock; payload copies run concurrently.
"""

import asyncio
import os
from datetime import datetime
from typing import BinaryIO, Optional

from common.constants import OUTPUT_DIR, CHUNK_SIZE, TIMESTAMP_FORMAT, FILE_SUFFIX


class FileSink:
    """Server-side destination file handling."""

    def __init__(self, output_dir: str = OUTPUT_DIR, chunk_size: int = CHUNK_SIZE):
        self.output_dir = os.fsencode(output_dir)
        self.chunk_size = chunk_size
        self.lock = asyncio.Lock()  # File-creation critical section

    def build_name(self, name: bytes, now: Optional[datetime] = None) -> bytes:
        """Return ``<name>_<YYYYMMDDHHMMSS>.txt`` with the name bytes untouched."""
        timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        return name + b"_" + timestamp.encode('ascii') + FILE_SUFFIX.encode('ascii')

    async def create(self, name: bytes) -> BinaryIO:
        """Create the destination file for a transfer.

        The lock covers name construction and creation only. An existing
        file with the same name is truncated. Raises OSError, or ValueError
        for names containing NUL bytes.
        """
        async with self.lock:
            path = os.path.join(self.output_dir, self.build_name(name))
            return open(path, 'wb')

    async def write(self, handle: BinaryIO, reader: asyncio.StreamReader) -> int:
        """Copy the reader into the file until end-of-stream."""
        bytes_written = 0
        while True:
            data = await reader.read(self.chunk_size)
            if not data:
                break
            handle.write(data)
            bytes_written += len(data)
        handle.flush()
        return bytes_written

    def close(self, handle: BinaryIO):
        """Release the file handle; safe to call more than once."""
        if not handle.closed:
            handle.close()

    @staticmethod
    def display_path(handle: BinaryIO) -> str:
        return os.fsdecode(handle.name)
