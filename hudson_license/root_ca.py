"""
Sources for the root CA certificate every license must chain to.

The root certificate is trusted input bundled with the application. It is
loaded through a RootCaSource so tests and deployments can substitute their
own CA, and parsed once per process by CachedRootCertificate.
"""

import logging
import threading
from abc import ABC, abstractmethod
from importlib import resources

from cryptography import x509

from hudson_license.errors import RootCertificateError

logger = logging.getLogger(__name__)


class RootCaSource(ABC):

    _cache = None
    _cache_lock = threading.Lock()

    @abstractmethod
    def load_pem(self):
        """Return the PEM bytes of the root CA certificate."""

    def cached(self):
        """
        Return the CachedRootCertificate shared by every user of this source.

        Validators built from the same source object parse the root CA once,
        however many of them are created.
        """
        with RootCaSource._cache_lock:
            if self._cache is None:
                self._cache = CachedRootCertificate(self)
            return self._cache


class StaticRootCaSource(RootCaSource):

    def __init__(self, pem):
        self.pem = pem.encode("ascii") if isinstance(pem, str) else pem

    def load_pem(self):
        return self.pem


class FileRootCaSource(RootCaSource):

    def __init__(self, path):
        self.path = path

    def load_pem(self):
        with open(self.path, "rb") as f:
            return f.read()


class PackageRootCaSource(RootCaSource):
    """Root CA shipped as package data, read with importlib.resources."""

    def __init__(self, package, resource):
        self.package = package
        self.resource = resource

    def load_pem(self):
        return resources.files(self.package).joinpath(self.resource).read_bytes()


class CachedRootCertificate:
    """
    Parse the root CA once and share it read-only afterwards.

    Concurrent first calls are serialized by a lock; later calls return the
    cached certificate without locking.

    Args:
        source (RootCaSource): Where the PEM bytes come from
    """

    def __init__(self, source):
        self.source = source
        self._certificate = None
        self._lock = threading.Lock()

    def get(self):
        """
        Return the parsed root CA certificate.

        Raises:
            RootCertificateError: If the resource cannot be read or parsed
        """
        certificate = self._certificate
        if certificate is not None:
            return certificate

        with self._lock:
            if self._certificate is None:
                self._certificate = self._load()
            return self._certificate

    def _load(self):
        try:
            pem = self.source.load_pem()
        except (OSError, ModuleNotFoundError) as e:
            raise RootCertificateError("Unable to read the license CA certificate", e) from e

        try:
            certificate = x509.load_pem_x509_certificate(pem)
        except ValueError as e:
            raise RootCertificateError("Invalid license CA certificate", e) from e

        logger.debug(f"Loaded license CA certificate: {certificate.subject.rfc4514_string()}")
        return certificate
