from hudson_license.errors import LicenseError
from hudson_license.identity import HostIdentityProvider, SecretFileHostIdentity, StaticHostIdentity
from hudson_license.license import License, LicenseValidator
from hudson_license.root_ca import (
    CachedRootCertificate,
    FileRootCaSource,
    PackageRootCaSource,
    RootCaSource,
    StaticRootCaSource,
)
