"""
PEM decoding for license keys and certificates.

Functions:
    load_key_pair(key_text):
        Decodes a PEM RSA private key and derives its public key.

    load_certificate(cert_text):
        Decodes a PEM X.509 certificate.

Both functions work on in-memory text only and translate every library
failure into the matching LicenseError.
"""

import logging

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from hudson_license.errors import MalformedCertificate, MalformedKey

logger = logging.getLogger(__name__)


def load_key_pair(key_text):
    """
    Decode a PEM encoded RSA private key.

    Both the traditional "RSA PRIVATE KEY" block and PKCS#8 are accepted.
    Encrypted keys are rejected since licenses ship without a passphrase.

    Args:
        key_text (str): PEM text, already trimmed

    Returns:
        tuple: (RSAPrivateKey, RSAPublicKey)

    Raises:
        MalformedKey: If the text is not a usable RSA private key
    """
    try:
        private_key = serialization.load_pem_private_key(key_text.encode("ascii"), password=None)
    except (ValueError, TypeError, UnicodeEncodeError, UnsupportedAlgorithm) as e:
        logger.debug(f"Private key decoding failed: {type(e).__name__}")
        raise MalformedKey("Invalid license key", e) from e

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise MalformedKey(f"Invalid license key: expected an RSA key, got {type(private_key).__name__}")

    return private_key, private_key.public_key()


def load_certificate(cert_text):
    """
    Decode a PEM encoded X.509 certificate.

    The subject, issuer and validity fields are parsed lazily by
    cryptography, so they are read here once to surface encoding errors as
    MalformedCertificate rather than later in the pipeline.

    Args:
        cert_text (str): PEM text, already trimmed

    Returns:
        x509.Certificate: Parsed certificate

    Raises:
        MalformedCertificate: On any structural parse error
    """
    try:
        cert = x509.load_pem_x509_certificate(cert_text.encode("ascii"))
        cert.subject, cert.issuer, cert.not_valid_before_utc, cert.not_valid_after_utc
        return cert
    except (ValueError, UnicodeEncodeError) as e:
        logger.debug(f"Certificate decoding failed: {e}")
        raise MalformedCertificate("Invalid certificate", e) from e
