"""
License validation errors.

Every stage of the validation pipeline fails with exactly one of the classes
below. All of them derive from LicenseError so a caller can reject a license
attempt with a single except clause while still telling the outcomes apart.
"""


class LicenseError(Exception):
    """
    Base class for a rejected license.

    Args:
        message (str): Human-readable reason, never containing key material
        cause (Exception, optional): Underlying decoding or security error
    """

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class MalformedKey(LicenseError):
    pass


class MalformedCertificate(LicenseError):
    pass


class KeyCertificateMismatch(LicenseError):
    pass


class NotYetValid(LicenseError):
    pass


class Expired(LicenseError):
    pass


class InvalidOrganizationField(LicenseError):
    pass


class InvalidAttributeValue(LicenseError):
    pass


class ServerMismatch(LicenseError):
    """The license is bound to another installation."""

    def __init__(self, server_key, cause=None):
        super().__init__(f"This license belongs to another server: {server_key}", cause)
        self.server_key = server_key


class UntrustedChain(LicenseError):
    pass


class RootCertificateError(LicenseError):
    """The bundled root CA could not be read or parsed."""
