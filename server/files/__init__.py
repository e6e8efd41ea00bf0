"""
File ingestion module for server-side file operations.

Handles:
- Destination file naming
- Serialized file creation
- Payload copy to disk
"""
