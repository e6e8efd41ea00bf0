#!/usr/bin/env python3
"""
QUIC File Ingestion Server - Main Entry Point

Listens on UDP 0.0.0.0:8080 (ALPN "quic-file-transfer") with a freshly
generated self-signed certificate and writes every received file into the
current working directory as <filename>_<YYYYMMDDHHMMSS>.txt.

Usage:
    python main_server.py

The server takes no options.
"""

if __name__ == "__main__":
    import asyncio
    import sys
    import argparse

    # Import the server components directly
    from server.main_server import FileTransferServer
    from server.utils.logger import logger

    parser = argparse.ArgumentParser(description='QUIC File Ingestion Server')
    parser.parse_args()

    try:
        asyncio.run(FileTransferServer().start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except Exception as e:
        import traceback
        logger.error(f"Server failed to start: {e}")
        traceback.print_exc()
        sys.exit(1)
