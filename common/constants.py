"""
Shared constants for the QUIC file ingestion system.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 8080

# TLS / QUIC
ALPN_PROTOCOL = 'quic-file-transfer'
RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
CERT_VALIDITY_HOURS = 24
CERT_COMMON_NAME = 'quic-file-transfer'
IDLE_TIMEOUT = 60.0  # seconds, enforced by the QUIC layer

# Framing
FILENAME_LENGTH_SIZE = 1  # bytes for filename length header
MAX_FILENAME_LENGTH = 255

# Buffer Sizes
CHUNK_SIZE = 8192

# Destination files
OUTPUT_DIR = '.'
TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'
FILE_SUFFIX = '.txt'

# Timeouts
TRANSFER_TIMEOUT = 300  # 5 minutes in seconds

# Stream error codes (application level, sent on abort)
STREAM_ERROR_ABORTED = 0x1

# Logging
LOG_DIR = 'logs'
TRANSFER_LOG_FILE = 'file_transfers.log'
