#!/usr/bin/env python3
"""
Unit tests for credential provisioning in server/utils/credentials.py
"""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

# Import from the project root
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server.utils.credentials import CredentialError, generate_self_signed_certificate, generate_tls_config


class TestCredentials(unittest.TestCase):
    """Test cases for the self-signed server identity."""

    def test_tls_config(self):
        """Configuration carries a certificate, a key and one ALPN id."""
        config = generate_tls_config()

        self.assertFalse(config.is_client)
        self.assertIsNotNone(config.certificate)
        self.assertIsNotNone(config.private_key)
        self.assertEqual(config.alpn_protocols, ["quic-file-transfer"])

    def test_certificate_is_self_signed(self):
        certificate, key = generate_self_signed_certificate()

        self.assertEqual(certificate.issuer, certificate.subject)
        self.assertEqual(key.key_size, 2048)
        self.assertEqual(
            certificate.public_key().public_numbers(),
            key.public_key().public_numbers()
        )

    def test_certificate_valid_for_24_hours_from_now(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        certificate, _ = generate_self_signed_certificate()
        after = datetime.now(timezone.utc)

        not_before = certificate.not_valid_before_utc
        not_after = certificate.not_valid_after_utc

        self.assertEqual(not_after - not_before, timedelta(hours=24))
        self.assertGreaterEqual(not_before, before)
        self.assertLessEqual(not_before, after)

    def test_key_generation_failure_is_fatal(self):
        with patch('server.utils.credentials.rsa.generate_private_key', side_effect=ValueError("no entropy")):
            with self.assertRaises(CredentialError):
                generate_tls_config()


if __name__ == '__main__':
    unittest.main()
