"""
X.509 Certificate Signature Verification

This module recomputes the signature a CA put on a license certificate,
using the raw RSA and ECDSA equations. The trust chain verifier runs it in
addition to cryptography's own issuer check.

Functions:
    can_recompute_signature(cert, ca_cert):
        Tells whether the signature algorithm of 'cert' is supported here.

    verify_cert_signature(cert, ca_cert):
        Verifies the signature of 'cert' with the public key of 'ca_cert'.

Supported Algorithms:
    - RSA with PKCS#1 v1.5 padding and SHA-256/384/512
    - ECDSA with SHA-256/384/512 on the curves known to ecpy
"""

import logging

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature
from cryptography.hazmat.primitives.hashes import Hash
from cryptography.x509.oid import SignatureAlgorithmOID
from ecpy.curves import Curve, Point

from hudson_license.math_utils import bytes_to_long, inverse, long_to_bytes, truncate_hash

logger = logging.getLogger(__name__)

RSA_ALGORITHMS = (
    SignatureAlgorithmOID.RSA_WITH_SHA256,
    SignatureAlgorithmOID.RSA_WITH_SHA384,
    SignatureAlgorithmOID.RSA_WITH_SHA512,
)

ECDSA_ALGORITHMS = (
    SignatureAlgorithmOID.ECDSA_WITH_SHA256,
    SignatureAlgorithmOID.ECDSA_WITH_SHA384,
    SignatureAlgorithmOID.ECDSA_WITH_SHA512,
)

# ASN.1 DigestInfo headers used in RSA PKCS#1 v1.5 signatures
DIGEST_INFO_PREFIXES = {
    "sha256": bytes.fromhex("3031300d060960864801650304020105000420"),
    "sha384": bytes.fromhex("3041300d060960864801650304020205000430"),
    "sha512": bytes.fromhex("3051300d060960864801650304020305000440"),
}


def _digest(message, hash_algorithm):
    hash_obj = Hash(hash_algorithm)
    hash_obj.update(message)
    return hash_obj.finalize()


def verify_rsa_signature(public_key, message, signature, hash_algorithm):
    """
    Verify an RSA PKCS#1 v1.5 signature.

    The recovered block must be exactly 00 01 FF..FF 00 DigestInfo, with the
    padding filling the whole modulus length.

    Args:
        public_key (rsa.RSAPublicKey): Signer's public key
        message (bytes): The signed data (TBS certificate bytes)
        signature (bytes): The signature to verify
        hash_algorithm: Hash algorithm named by the signature algorithm

    Returns:
        bool: True if the signature is valid, False otherwise
    """
    prefix = DIGEST_INFO_PREFIXES.get(hash_algorithm.name)
    if prefix is None:
        return False

    numbers = public_key.public_numbers()
    e, n = numbers.e, numbers.n
    k = (n.bit_length() + 7) // 8

    s = bytes_to_long(signature)
    if len(signature) != k or s >= n:
        return False

    digest_info = prefix + _digest(message, hash_algorithm)
    padding_length = k - len(digest_info) - 3
    if padding_length < 8:
        return False

    expected = b"\x00\x01" + b"\xff" * padding_length + b"\x00" + digest_info
    return long_to_bytes(pow(s, e, n), k) == expected


def verify_ecdsa_signature(public_key, message, signature, hash_algorithm):
    """
    Verify an ECDSA signature.

    Args:
        public_key (ec.EllipticCurvePublicKey): Signer's public key
        message (bytes): The signed data (TBS certificate bytes)
        signature (bytes): DER encoded (r, s) pair
        hash_algorithm: Hash algorithm named by the signature algorithm

    Returns:
        bool: True if the signature is valid, False otherwise
    """
    numbers = public_key.public_numbers()
    curve = Curve.get_curve(numbers.curve.name)
    if curve is None:
        logger.info(f"Unsupported curve: {numbers.curve.name}")
        return False
    n = curve.order
    G = curve.generator

    Qa = Point(numbers.x, numbers.y, curve)
    if not curve.is_on_curve(Qa):
        return False

    try:
        r, s = decode_dss_signature(signature)
    except ValueError:
        logger.debug("Malformed ECDSA signature")
        return False
    if not 1 <= r < n or not 1 <= s < n:
        return False

    message_hash = truncate_hash(_digest(message, hash_algorithm), n)

    u = inverse(s, n)
    u1 = (message_hash * u) % n
    u2 = (r * u) % n

    P = u1 * G + u2 * Qa
    return P.x % n == r


def can_recompute_signature(cert, ca_cert):
    """
    Tell whether verify_cert_signature knows the algorithm of 'cert'.

    Signatures made with other algorithms (RSA-PSS, EdDSA) or on curves ecpy
    does not know are left to cryptography's issuer check alone.
    """
    algorithm = cert.signature_algorithm_oid
    pub_key = ca_cert.public_key()
    if algorithm in RSA_ALGORITHMS:
        return isinstance(pub_key, rsa.RSAPublicKey)
    if algorithm in ECDSA_ALGORITHMS:
        return isinstance(pub_key, ec.EllipticCurvePublicKey) and Curve.get_curve(pub_key.curve.name) is not None
    return False


def verify_cert_signature(cert, ca_cert):
    """
    Verify that 'ca_cert' signed 'cert'.

    Args:
        cert (x509.Certificate): License certificate
        ca_cert (x509.Certificate): Issuing CA certificate

    Returns:
        bool: True if the signature is valid, False otherwise
    """
    algorithm = cert.signature_algorithm_oid
    pub_key = ca_cert.public_key()

    if algorithm in RSA_ALGORITHMS and isinstance(pub_key, rsa.RSAPublicKey):
        return verify_rsa_signature(pub_key, cert.tbs_certificate_bytes, cert.signature,
                                    cert.signature_hash_algorithm)
    if algorithm in ECDSA_ALGORITHMS and isinstance(pub_key, ec.EllipticCurvePublicKey):
        return verify_ecdsa_signature(pub_key, cert.tbs_certificate_bytes, cert.signature,
                                      cert.signature_hash_algorithm)

    logger.info("Unsupported signature algorithm")
    logger.debug(f'Algorithm OID: {algorithm.dotted_string}, CA key: {type(pub_key).__name__}')
    return False
