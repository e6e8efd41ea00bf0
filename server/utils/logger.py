"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path

from common.constants import LOG_DIR, TRANSFER_LOG_FILE
from server.utils.config import ServerConfig


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        self.logs_dir = Path(logs_dir)

        # Set up main logger
        self.logger = logging.getLogger('file_transfer_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)

        # Set up file paths
        self.transfer_log_path = self.logs_dir / TRANSFER_LOG_FILE

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_listening(self, host: str, port: int, alpn: str):
        """Log listener startup."""
        self.info(f"Server listening on {host}:{port} (UDP, ALPN '{alpn}')")

    def log_connection(self, conn_id: str):
        """Log accepted connection."""
        self.info(f"New connection {conn_id}")

    def log_file_receiving(self, filename: str, path: str, conn_id: str):
        """Log start of payload copy."""
        self.info(f"Receiving file: '{filename}' -> {path} (conn={conn_id})")

    def log_file_received(self, filename: str, path: str, size: int, conn_id: str):
        """Log successful transfer."""
        self.info(f"✓ FILE RECEIVED: '{filename}' ({size} bytes)")
        self.info(f"  Saved as: {path}")
        self._write_to_file(self.transfer_log_path, f"{datetime.now().isoformat()} | RECEIVED | {filename} | PATH: {path} | SIZE: {size} bytes | CONN: {conn_id}")

    def log_transfer_failed(self, stage: str, conn_id: str, error: Exception):
        """Log a stream-scoped failure."""
        self.error(f"✗ Failed to {stage} (conn={conn_id}): {error}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger(**ServerConfig().get_log_settings())
