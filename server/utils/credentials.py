"""
Credential provisioning module.

Builds the ephemeral, self-signed TLS identity the QUIC listener presents.
It runs once at startup; any failure here is fatal.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from aioquic.quic.configuration import QuicConfiguration

from common.constants import (
    ALPN_PROTOCOL, RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT, CERT_VALIDITY_HOURS,
    CERT_COMMON_NAME, IDLE_TIMEOUT
)


class CredentialError(Exception):
    """Raised when the server identity cannot be generated."""


def generate_self_signed_certificate(validity_hours: int = CERT_VALIDITY_HOURS):
    """Generate an RSA key and a self-signed certificate valid from now."""
    try:
        key = rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=RSA_KEY_SIZE)

        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, CERT_COMMON_NAME)])
        not_before = datetime.now(timezone.utc)
        not_after = not_before + timedelta(hours=validity_hours)

        certificate = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .sign(key, hashes.SHA256())
        )
    except (ValueError, TypeError) as e:
        raise CredentialError(f"failed to build certificate: {e}") from e

    return certificate, key


def generate_tls_config(alpn_protocols: Optional[List[str]] = None,
                        validity_hours: int = CERT_VALIDITY_HOURS,
                        idle_timeout: float = IDLE_TIMEOUT) -> QuicConfiguration:
    """Return a server QUIC configuration carrying a fresh identity."""
    certificate, key = generate_self_signed_certificate(validity_hours)

    configuration = QuicConfiguration(
        is_client=False,
        alpn_protocols=alpn_protocols or [ALPN_PROTOCOL],
        idle_timeout=idle_timeout,
    )
    configuration.certificate = certificate
    configuration.private_key = key
    return configuration
