"""
Transport module for the QUIC listening endpoint.

Handles:
- Listener binding and connection accept
- Per-connection stream accept
- Stream release (finish or abort)
"""
