"""
License keys.

A license is a PEM encoded RSA private key together with an X.509
certificate issued by the license CA. The certificate subject carries the
customer name (CN), an optional organizational unit (OU) and the license
attributes in the organization field (see hudson_license.attributes).

License values only come out of LicenseValidator.validate, which runs every
check below in this fixed order and stops at the first failure:

    1. decode the private key            MalformedKey
    2. decode the certificate            MalformedCertificate
    3. key matches certificate           KeyCertificateMismatch
    4. subscription period               NotYetValid / Expired
    5. organization attributes           InvalidOrganizationField / InvalidAttributeValue
    6. bound to this installation        ServerMismatch
    7. issued by the license CA          UntrustedChain
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from hudson_license.attributes import parse_organization
from hudson_license.codec import load_certificate, load_key_pair
from hudson_license.errors import LicenseError
from hudson_license.root_ca import CachedRootCertificate
from hudson_license.verify import verify_trust_chain
from hudson_license.verify_utils import (
    check_key_matches_certificate,
    check_server_binding,
    check_temporal_validity,
    subject_attribute,
)

logger = logging.getLogger(__name__)


def utc_now():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class License:
    """A validated license. Key material is kept out of repr()."""

    raw_key_text: str = field(repr=False)
    raw_certificate_text: str = field(repr=False)
    private_key: rsa.RSAPrivateKey = field(repr=False, compare=False)
    public_key: rsa.RSAPublicKey = field(repr=False, compare=False)
    certificate: x509.Certificate = field(repr=False, compare=False)
    executors_limit: int
    server_identity_key: str
    expiration_date: datetime
    customer_name: Optional[str]
    organizational_unit: Optional[str]

    @property
    def expiration_date_string(self):
        """Expiration date in the current locale's date format."""
        return self.expiration_date.strftime("%x")

    @property
    def expiration_timestamp(self):
        """Expiration as milliseconds since the epoch."""
        return int(self.expiration_date.timestamp() * 1000)

    @classmethod
    def from_pem(cls, key_text, certificate_text, *, host_identity, root_ca, clock=None):
        """
        Shortcut for LicenseValidator(host_identity, root_ca, clock).validate(...).

        Pass the same root_ca object on every call so the root CA is parsed once.
        """
        return LicenseValidator(host_identity, root_ca, clock).validate(key_text, certificate_text)


class LicenseValidator:
    """
    Validates license key/certificate pairs for one installation.

    A validator holds no per-license state and may be shared between threads.
    The root CA is parsed on first use and reused afterwards, also by other
    validators built from the same RootCaSource object.

    Args:
        host_identity (HostIdentityProvider): Identity of this installation
        root_ca (RootCaSource or CachedRootCertificate): The license CA
        clock (callable, optional): Returns the current aware datetime
    """

    def __init__(self, host_identity, root_ca, clock=None):
        self.host_identity = host_identity
        self.root_ca = root_ca if isinstance(root_ca, CachedRootCertificate) else root_ca.cached()
        self.clock = clock or utc_now

    def validate(self, key_text, certificate_text):
        """
        Turn a key/certificate pair into a License.

        Args:
            key_text (str): PEM encoded RSA private key
            certificate_text (str): PEM encoded X.509 certificate

        Returns:
            License: The validated license

        Raises:
            LicenseError: The specific subclass of the first failed check
        """
        try:
            return self._validate(key_text.strip(), certificate_text.strip())
        except LicenseError as e:
            logger.info(f"License rejected ({type(e).__name__}): {e.message}")
            raise

    def _validate(self, key_text, certificate_text):
        private_key, public_key = load_key_pair(key_text)
        cert = load_certificate(certificate_text)
        logger.debug(f"Decoded license certificate {cert.subject.rfc4514_string()}")

        check_key_matches_certificate(public_key, cert)

        now = self.clock()
        check_temporal_validity(cert, now)

        attributes = parse_organization(subject_attribute(cert, NameOID.ORGANIZATION_NAME))
        check_server_binding(attributes.server_key, self.host_identity)

        verify_trust_chain(cert, self.root_ca.get(), now)

        return License(
            raw_key_text=key_text,
            raw_certificate_text=certificate_text,
            private_key=private_key,
            public_key=public_key,
            certificate=cert,
            executors_limit=attributes.executors,
            server_identity_key=attributes.server_key,
            expiration_date=cert.not_valid_after_utc,
            customer_name=subject_attribute(cert, NameOID.COMMON_NAME),
            organizational_unit=subject_attribute(cert, NameOID.ORGANIZATIONAL_UNIT_NAME),
        )
