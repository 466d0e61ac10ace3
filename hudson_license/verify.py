"""
Trust chain verification for license certificates.

A license chain is always two certificates long: the license certificate and
the license CA that issued it. The CA is the only trust anchor, so no
intermediate certificate is ever accepted.
"""

import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm

from hudson_license.errors import UntrustedChain
from hudson_license.verify_extensions import verify_basic_constraints, verify_key_usage
from hudson_license.verify_sig import can_recompute_signature, verify_cert_signature

logger = logging.getLogger(__name__)


def verify_certificate(cert, ca_cert, now):
    """
    Verify that 'cert' was issued by 'ca_cert' and that 'ca_cert' may issue it.

    Args:
        cert (x509.Certificate): License certificate
        ca_cert (x509.Certificate): CA certificate acting as trust anchor
        now (datetime): Current time, timezone aware

    Raises:
        UntrustedChain: If any link of the path is invalid
    """
    # Issuer/subject linkage
    if cert.issuer != ca_cert.subject:
        logger.debug(f"Issuer {cert.issuer.rfc4514_string()} is not {ca_cert.subject.rfc4514_string()}")
        raise UntrustedChain("Invalid CA in the license key: unknown issuer")

    # Signature, checked by cryptography then recomputed where the algorithm allows
    try:
        cert.verify_directly_issued_by(ca_cert)
    except (ValueError, TypeError, InvalidSignature, UnsupportedAlgorithm) as e:
        raise UntrustedChain("Invalid CA in the license key", e) from e

    if can_recompute_signature(cert, ca_cert) and not verify_cert_signature(cert, ca_cert):
        raise UntrustedChain("Invalid CA in the license key: signature mismatch")

    # Check basic constraints and key usage of the anchor
    if not verify_basic_constraints(ca_cert):
        raise UntrustedChain("Invalid CA in the license key: issuer is not a CA")
    if not verify_key_usage(ca_cert):
        raise UntrustedChain("Invalid CA in the license key: issuer may not sign certificates")

    # Check validity period of the anchor
    if now < ca_cert.not_valid_before_utc or now > ca_cert.not_valid_after_utc:
        raise UntrustedChain("Invalid CA in the license key: CA certificate is outside its validity period")


def verify_trust_chain(cert, ca_cert, now):
    """
    Verify the chain [cert, ca_cert] with ca_cert as the sole trust anchor.

    Args:
        cert (x509.Certificate): License certificate
        ca_cert (x509.Certificate): Root CA certificate
        now (datetime): Current time, timezone aware

    Raises:
        UntrustedChain: If no valid path to the root exists
    """
    verify_certificate(cert, ca_cert, now)
    logger.debug(f"Trust chain verified up to {ca_cert.subject.rfc4514_string()}")
