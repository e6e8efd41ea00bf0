"""
Client package for the QUIC file ingestion system.

This package contains the sending side:
- Framed file upload over QUIC
- Configuration and utilities
"""
