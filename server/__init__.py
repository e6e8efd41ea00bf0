"""
Server package for the QUIC file ingestion system.

This package contains all server-side functionality including:
- QUIC listener and connection dispatch
- Destination file creation and payload copy
- Credential provisioning, configuration and logging
"""
