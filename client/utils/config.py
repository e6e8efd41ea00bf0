"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import DEFAULT_HOST, DEFAULT_PORT, ALPN_PROTOCOL, CHUNK_SIZE, TRANSFER_TIMEOUT


class ClientConfig:
    """Client configuration class."""
    
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
        self.host = host
        self.port = port
        
        # File transfer settings
        self.chunk_size = CHUNK_SIZE
        self.transfer_timeout = TRANSFER_TIMEOUT
        
        # Connection settings
        self.alpn_protocols = [ALPN_PROTOCOL]
        self.verify_certificate = False  # server identity is ephemeral and self-signed
    
    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
    
    def get_file_settings(self):
        """Get file transfer settings."""
        return {
            'chunk_size': self.chunk_size,
            'transfer_timeout': self.transfer_timeout
        }
