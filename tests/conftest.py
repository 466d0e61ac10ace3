"""
Shared fixtures: throwaway license CAs, keys and license certificates.
"""

from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.x509.oid import NameOID

from hudson_license.identity import StaticHostIdentity
from hudson_license.license import LicenseValidator
from hudson_license.root_ca import StaticRootCaSource

SERVER_KEY = "ABC123"
ORGANIZATION = f"Hudson Customer:executors=10,serverKey={SERVER_KEY}"
CUSTOMER = "Acme Corp"
UNIT = "Build Farm"


def _rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def key_pem(key):
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode("ascii")


def cert_pem(cert):
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


def build_ca(key, *, common_name="Test License CA", basic_constraints=True, key_cert_sign=True,
             not_before=None, not_after=None):
    now = datetime.now(timezone.utc)
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "InfraDNA Test"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before or now - timedelta(days=1))
        .not_valid_after(not_after or now + timedelta(days=3650))
        .add_extension(
            x509.KeyUsage(
                digital_signature=False,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=key_cert_sign,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
    )
    if basic_constraints:
        builder = builder.add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
    return builder.sign(key, hashes.SHA256())


def build_license_cert(key, ca_cert, ca_key, *, organization=ORGANIZATION, common_name=CUSTOMER, unit=UNIT,
                       not_before=None, not_after=None, hash_algorithm=None, rsa_padding=None):
    now = datetime.now(timezone.utc)
    attributes = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if organization is not None:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
    if unit is not None:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, unit))
    return (
        x509.CertificateBuilder()
        .subject_name(x509.Name(attributes))
        .issuer_name(ca_cert.subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before or now - timedelta(days=1))
        .not_valid_after(not_after or now + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(ca_key, hash_algorithm or hashes.SHA256(), rsa_padding=rsa_padding)
    )


@pytest.fixture(scope="session")
def ca_key():
    return _rsa_key()


@pytest.fixture(scope="session")
def ca_cert(ca_key):
    return build_ca(ca_key)


@pytest.fixture(scope="session")
def license_key():
    return _rsa_key()


@pytest.fixture(scope="session")
def other_key():
    return _rsa_key()


@pytest.fixture(scope="session")
def ec_ca_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def license_cert(license_key, ca_cert, ca_key):
    return build_license_cert(license_key, ca_cert, ca_key)


@pytest.fixture
def root_ca(ca_cert):
    return StaticRootCaSource(cert_pem(ca_cert))


@pytest.fixture
def validator(root_ca):
    return LicenseValidator(StaticHostIdentity(SERVER_KEY), root_ca)


def pss_padding():
    return padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=padding.PSS.DIGEST_LENGTH)
