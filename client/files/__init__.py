"""
File transfer module for client-side file operations.

Handles:
- Opening a QUIC connection to the server
- Sending one framed file per stream
"""
