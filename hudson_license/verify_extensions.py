"""
X.509 extension checks for the license CA.

This module verifies the extensions that allow a certificate to act as the
issuer of license certificates.

Functions:
    verify_key_usage(ca_cert):
        Verifies that the CA may sign certificates.

    verify_basic_constraints(ca_cert):
        Verifies that the CA flag is set.
"""

from cryptography import x509


def verify_key_usage(ca_cert):
    """
    Verify the key usage extension of the CA certificate.

    A CA without a key usage extension is unrestricted; when the extension is
    present it must allow certificate signing.

    Args:
        ca_cert (x509.Certificate): CA certificate that issued the license

    Returns:
        bool: True if key usage is valid, False otherwise
    """
    try:
        key_usage_extension = ca_cert.extensions.get_extension_for_class(x509.KeyUsage)
    except x509.ExtensionNotFound:
        return True
    return key_usage_extension.value.key_cert_sign


def verify_basic_constraints(ca_cert):
    """
    Verify the basic constraints extension of the CA certificate.

    Args:
        ca_cert (x509.Certificate): CA certificate that issued the license

    Returns:
        bool: True if the extension is present with the CA flag set
    """
    try:
        ca_basic_constraints = ca_cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return False
    return ca_basic_constraints.value.ca
