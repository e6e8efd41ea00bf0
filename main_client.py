#!/usr/bin/env python3
"""
QUIC File Ingestion Client - Main Entry Point

Sends one file to the ingestion server over a single QUIC stream.

Usage:
    python main_client.py FILE [--server-ip HOST] [--port PORT] [--name NAME]
"""

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    """Main entry point."""
    import asyncio
    from client.files.file_client import FileClient
    from client.utils.logger import logger
    from common.constants import DEFAULT_HOST, DEFAULT_PORT

    parser = argparse.ArgumentParser(description='QUIC File Ingestion Client')
    parser.add_argument('file', type=str,
                       help='File to send')
    parser.add_argument('--server-ip', type=str, default=DEFAULT_HOST,
                       help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                       help=f'Server UDP port (default: {DEFAULT_PORT})')
    parser.add_argument('--name', type=str, default=None,
                       help='Filename to announce (default: basename of FILE, max 255 bytes)')
    
    args = parser.parse_args()
    
    client = FileClient(args.server_ip, args.port)
    try:
        asyncio.run(client.send_file(args.file, args.name))
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.log_error("send", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
