#!/usr/bin/env python3
"""
Tests for server/client configuration defaults.
"""

import unittest

# Import from the project root
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.utils.config import ClientConfig
from server.utils.config import ServerConfig
from server.utils.logger import ServerLogger, logger


class TestServerConfig(unittest.TestCase):
    """Test cases for ServerConfig."""

    def test_log_settings(self):
        config = ServerConfig()

        self.assertEqual(config.get_log_settings(), {'logs_dir': 'logs'})

    def test_global_logger_uses_configured_logs_dir(self):
        self.assertEqual(logger.logs_dir, Path(ServerConfig().logs_dir))
        self.assertEqual(logger.transfer_log_path, Path('logs') / 'file_transfers.log')

    def test_logger_accepts_log_settings(self):
        config = ServerConfig()
        config.logs_dir = 'elsewhere'

        server_logger = ServerLogger(**config.get_log_settings())

        self.assertEqual(server_logger.transfer_log_path, Path('elsewhere') / 'file_transfers.log')

    def test_connection_info(self):
        info = ServerConfig().get_connection_info()

        self.assertEqual(info['host'], '0.0.0.0')
        self.assertEqual(info['port'], 8080)


class TestClientConfig(unittest.TestCase):
    """Test cases for ClientConfig."""

    def test_file_settings(self):
        settings = ClientConfig().get_file_settings()

        self.assertEqual(settings['chunk_size'], 8192)


if __name__ == '__main__':
    unittest.main()
