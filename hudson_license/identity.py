"""Providers of the identity hash a license is bound to."""

import hashlib
from abc import ABC, abstractmethod


class HostIdentityProvider(ABC):

    @abstractmethod
    def current_identity_hash(self):
        """Return the stable hash identifying this installation."""


class StaticHostIdentity(HostIdentityProvider):
    """A fixed identity hash, e.g. taken from configuration."""

    def __init__(self, identity_hash):
        self.identity_hash = identity_hash

    def current_identity_hash(self):
        return self.identity_hash


class SecretFileHostIdentity(HostIdentityProvider):
    """
    Identity derived from the installation's secret key file.

    The hash is the lowercase SHA-256 hex digest of the file content with
    surrounding whitespace removed. The file is read on every call so a
    regenerated secret takes effect without a restart.

    Args:
        path (str): Path to the secret key file
    """

    def __init__(self, path):
        self.path = path

    def current_identity_hash(self):
        with open(self.path, "r", encoding="utf-8") as f:
            secret = f.read().strip()
        return hashlib.sha256(secret.encode("utf-8")).hexdigest()
