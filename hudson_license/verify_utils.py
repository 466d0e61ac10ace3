"""
Consistency, validity and binding checks run on a decoded license.

Functions:
    check_key_matches_certificate(public_key, cert):
        Ensures the certificate embeds the public half of the license key.

    check_temporal_validity(cert, now):
        Ensures the subscription period covers the current time.

    check_server_binding(server_key, host_identity):
        Ensures the license was issued for this installation.

    subject_attribute(cert, oid):
        Reads one attribute of the certificate subject.
"""

import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa

from hudson_license.errors import Expired, KeyCertificateMismatch, NotYetValid, ServerMismatch

logger = logging.getLogger(__name__)


def check_key_matches_certificate(public_key, cert):
    """
    Compare the derived public key with the one embedded in the certificate.

    The comparison is by value (modulus and exponent), not by object identity.

    Args:
        public_key (rsa.RSAPublicKey): Public key derived from the license key
        cert (x509.Certificate): License certificate

    Raises:
        KeyCertificateMismatch: If the two keys differ
    """
    try:
        cert_key = cert.public_key()
    except (ValueError, UnsupportedAlgorithm) as e:
        raise KeyCertificateMismatch("Key and certificate don't match: unreadable certificate key", e) from e

    if not isinstance(cert_key, rsa.RSAPublicKey) or cert_key.public_numbers() != public_key.public_numbers():
        raise KeyCertificateMismatch("Key and certificate don't match")


def check_temporal_validity(cert, now):
    """
    Check that now lies within [not_valid_before, not_valid_after].

    Args:
        cert (x509.Certificate): License certificate
        now (datetime): Current time, timezone aware

    Raises:
        NotYetValid: If the subscription period has not started
        Expired: If the subscription period is over
    """
    if now < cert.not_valid_before_utc:
        raise NotYetValid(f"Subscription is not yet active (starts {cert.not_valid_before_utc:%Y-%m-%d})")
    if now > cert.not_valid_after_utc:
        raise Expired(f"Subscription has expired (ended {cert.not_valid_after_utc:%Y-%m-%d})")


def check_server_binding(server_key, host_identity):
    """
    Compare the license's serverKey with the installation identity hash.

    The provider is queried once; the comparison is exact and case-sensitive.

    Raises:
        ServerMismatch: If the license belongs to another installation
    """
    expected = host_identity.current_identity_hash()
    if server_key is None or server_key != expected:
        raise ServerMismatch(server_key)


def subject_attribute(cert, oid):
    """Return the first value of a subject attribute, or None when absent."""
    attributes = cert.subject.get_attributes_for_oid(oid)
    if not attributes:
        return None
    if len(attributes) > 1:
        logger.debug(f"Subject carries {len(attributes)} values for {oid.dotted_string}, using the first")
    return attributes[0].value
