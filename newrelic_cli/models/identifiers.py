"""Identifier value types: entity GUIDs, account IDs and API keys.

All validation here is local and cheap; it runs before any request is built.
"""

import base64
import binascii
import string
from typing import NamedTuple, Optional

from ..exceptions import ValidationError


BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/=")

# Entity GUIDs for real entities are comfortably longer than this
GUID_MIN_LENGTH = 40

API_KEY_MIN_LENGTH = 16
USER_KEY_PREFIX = "NRAK-"


class GUIDParts(NamedTuple):
    """Decoded components of an entity GUID."""

    account_id: str
    domain: str
    entity_type: str
    entity_id: str


def is_numeric(value: str) -> bool:
    """Return True for a non-empty string made only of ASCII digits."""
    return bool(value) and all("0" <= c <= "9" for c in value)


def looks_like_guid(value: str) -> bool:
    """Cheap pre-filter for entity GUIDs.

    This does not decode anything, so a string that passes may still fail
    ``parse_guid``.
    """
    if len(value) < GUID_MIN_LENGTH:
        return False
    return all(c in BASE64_ALPHABET for c in value)


def parse_guid(guid: str) -> GUIDParts:
    """Decode an entity GUID into its four pipe-delimited parts.

    Raises:
        ValidationError: If the GUID is not valid base64 or does not hold
            exactly four parts
    """
    try:
        decoded = base64.b64decode(guid.encode("ascii"), validate=True)
    except (binascii.Error, ValueError, UnicodeEncodeError) as e:
        raise ValidationError(
            f"invalid GUID format: {e}", field_name="guid", field_value=guid
        ) from e

    parts = decoded.decode("utf-8", errors="replace").split("|")
    if len(parts) != 4:
        raise ValidationError(
            f"invalid GUID format: expected 4 parts, got {len(parts)}",
            field_name="guid",
            field_value=guid
        )
    return GUIDParts(*parts)


def extract_app_id_from_guid(guid: str) -> str:
    """Return the numeric application ID held by an APM application GUID.

    Raises:
        ValidationError: If the GUID cannot be decoded or is not an APM
            application GUID
    """
    parts = parse_guid(guid)
    if parts.domain != "APM" or parts.entity_type != "APPLICATION":
        raise ValidationError(
            f"GUID is not for an APM application (domain={parts.domain}, type={parts.entity_type})",
            field_name="guid",
            field_value=guid
        )
    return parts.entity_id


def encode_guid(account_id: str, domain: str, entity_type: str, entity_id: str) -> "EntityGUID":
    """Build an entity GUID from its parts."""
    raw = "|".join([str(account_id), domain, entity_type, str(entity_id)])
    return EntityGUID(base64.b64encode(raw.encode("utf-8")).decode("ascii"))


class EntityGUID(str):
    """Opaque entity identifier: base64 of ``account|DOMAIN|TYPE|id``."""

    def parse(self) -> GUIDParts:
        return parse_guid(self)

    def app_id(self) -> str:
        return extract_app_id_from_guid(self)

    def looks_valid(self) -> bool:
        return looks_like_guid(self)


class AccountID(str):
    """Account identifier wrapping a positive base-10 integer.

    An empty value means "unset" and is not a validation failure by itself;
    ``validate`` distinguishes empty, non-numeric and non-positive input.
    """

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def validate(self) -> None:
        validate_account_id(self)

    def as_int(self) -> int:
        """Return the integer value, validating first."""
        self.validate()
        return int(self)


class APIKey(str):
    """User API key, conventionally prefixed ``NRAK-``."""

    def validate(self) -> Optional[str]:
        return validate_api_key(self)

    def masked(self) -> str:
        """Return a display-safe form of the key."""
        if len(self) <= 8:
            return "****"
        return self[:8] + "..."


def validate_account_id(value: str) -> None:
    """Validate that an account ID is non-empty, numeric and positive.

    Raises:
        ValidationError: With a distinct message for each failure mode
    """
    if value == "":
        raise ValidationError("account ID cannot be empty", field_name="account_id", field_value=value)

    # Optional sign followed by ASCII digits
    digits = value[1:] if value[:1] in ("+", "-") else value
    if not is_numeric(digits):
        raise ValidationError(
            f"invalid account ID {value!r}: must be numeric",
            field_name="account_id",
            field_value=value
        )

    if int(value, 10) <= 0:
        raise ValidationError(
            f"invalid account ID {value!r}: must be a positive number",
            field_name="account_id",
            field_value=value
        )


def validate_api_key(key: str) -> Optional[str]:
    """Validate an API key.

    Returns:
        A warning message when the key lacks the ``NRAK-`` prefix, else None.
        The warning is advisory and must not block the caller.

    Raises:
        ValidationError: If the key is empty or shorter than 16 characters
    """
    if key == "":
        raise ValidationError("API key cannot be empty", field_name="api_key")

    if len(key) < API_KEY_MIN_LENGTH:
        raise ValidationError(
            f"API key too short: minimum {API_KEY_MIN_LENGTH} characters",
            field_name="api_key"
        )

    if not key.startswith(USER_KEY_PREFIX):
        return f"API key does not start with '{USER_KEY_PREFIX}' (expected for User API keys)"

    return None
