"""
Server configuration module.

This module handles server-side configuration settings.
"""

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, OUTPUT_DIR, LOG_DIR, ALPN_PROTOCOL,
    CHUNK_SIZE, CERT_VALIDITY_HOURS, IDLE_TIMEOUT
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT, output_dir: str = OUTPUT_DIR):
        self.host = host
        self.port = port
        self.output_dir = output_dir

        # Logging configuration
        self.logs_dir = LOG_DIR

        # File transfer settings
        self.chunk_size = CHUNK_SIZE

        # TLS / QUIC settings
        self.alpn_protocols = [ALPN_PROTOCOL]
        self.cert_validity_hours = CERT_VALIDITY_HOURS
        self.idle_timeout = IDLE_TIMEOUT

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }

    def get_file_settings(self):
        """Get file transfer settings."""
        return {
            'output_dir': self.output_dir,
            'chunk_size': self.chunk_size
        }

    def get_tls_settings(self):
        """Get TLS settings."""
        return {
            'alpn_protocols': list(self.alpn_protocols),
            'validity_hours': self.cert_validity_hours,
            'idle_timeout': self.idle_timeout
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir
        }
