"""
Parser for the license attributes carried in the subject organization field.

The organization name of a license certificate looks like

    Hudson Customer:executors=10,serverKey=4f1c...

i.e. a fixed prefix followed by a comma separated list of name=value
tokens. Only ``executors`` and ``serverKey`` mean something today, other
names are kept aside so newer issuers can add attributes without breaking
older installations.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from hudson_license.errors import InvalidAttributeValue, InvalidOrganizationField

logger = logging.getLogger(__name__)

ORGANIZATION_PREFIX = "Hudson Customer:"

EXECUTORS = "executors"
SERVER_KEY = "serverKey"

# at most nine digits, the count always fits a 32-bit int
_DIGITS = re.compile(r"[0-9]{1,9}")


@dataclass(frozen=True)
class LicenseAttributes:
    executors: int = 0
    server_key: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)


def tokenize(text: str) -> Dict[str, str]:
    """
    Split ``name=value,name=value`` into a mapping.

    Each token must hold exactly one '=' and a non-empty name. Empty tokens
    (``a=1,,b=2`` or a trailing comma) are malformed too. When a name repeats,
    the last occurrence wins.

    Raises:
        InvalidOrganizationField: Naming the first malformed token
    """
    tokens = {}
    for token in text.split(","):
        if token.count("=") != 1:
            raise InvalidOrganizationField(f"Invalid organization name: malformed token '{token}'")
        name, value = token.split("=")
        if not name:
            raise InvalidOrganizationField(f"Invalid organization name: empty attribute name in '{token}'")
        if name in tokens:
            logger.debug(f"Attribute {name} repeated, keeping the last value")
        tokens[name] = value
    return tokens


def parse_executors(value: str) -> int:
    if not _DIGITS.fullmatch(value):
        shown = value if len(value) <= 20 else value[:20] + "..."
        raise InvalidAttributeValue(f"Invalid executors count: '{shown}'")
    return int(value)


def parse_organization(organization: Optional[str]) -> LicenseAttributes:
    """
    Parse the organization field of a license certificate subject.

    Args:
        organization: Raw organization name, None when the subject has none

    Returns:
        LicenseAttributes: executors limit (0 when absent), server key and
        any unrecognized attributes

    Raises:
        InvalidOrganizationField: Missing prefix or malformed token
        InvalidAttributeValue: executors is not a non-negative integer
    """
    if organization is None or not organization.startswith(ORGANIZATION_PREFIX):
        raise InvalidOrganizationField("Invalid organization name")

    tokens = tokenize(organization[len(ORGANIZATION_PREFIX):])

    executors = 0
    if EXECUTORS in tokens:
        executors = parse_executors(tokens.pop(EXECUTORS))
    server_key = tokens.pop(SERVER_KEY, None)

    if tokens:
        logger.debug(f"Ignoring unrecognized license attributes: {', '.join(sorted(tokens))}")

    return LicenseAttributes(executors=executors, server_key=server_key, extra=tokens)
