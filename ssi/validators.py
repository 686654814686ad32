"""
DID Input Validators

Validation helpers shared by keys, services and the DID builder. Every
validator raises ValidationError with a human-readable message; nothing here
mutates state.
"""

import re
from typing import Any, Optional

from ssi.config import DID_METHOD_NAME
from ssi.enums import KeyType, Network
from ssi.errors import ValidationError

DID_ID_PATTERN = re.compile(
    rf"{re.escape(DID_METHOD_NAME)}:(({Network.Mainnet.value}|{Network.Testnet.value}):)?[a-f0-9]{{64}}"
)
ALIAS_PATTERN = re.compile(r"[a-z0-9-]{1,32}")
SERVICE_ENDPOINT_PATTERN = re.compile(
    r"(http|https)://(\w+:?\w*@)?(\S+)(:[0-9]+)?(/|/([\w#!:.?+=&%@!\-/]))?"
)


def is_valid_did_id(did_id: Any) -> bool:
    """
    Check a DID identifier against the method grammar.

    Args:
        did_id: Candidate identifier

    Returns:
        True for "did:factom:<64 hex>" or "did:factom:<network>:<64 hex>"

    Example:
        >>> is_valid_did_id("did:factom:testnet:" + "a" * 64)
        True
    """
    return isinstance(did_id, str) and DID_ID_PATTERN.fullmatch(did_id) is not None


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_alias(alias: Any) -> None:
    if not isinstance(alias, str) or ALIAS_PATTERN.fullmatch(alias) is None:
        raise ValidationError(
            "Alias must not be more than 32 characters long and must contain only "
            "lower-case letters, digits and hyphens."
        )


def validate_key_type(key_type: Any) -> KeyType:
    """Return the KeyType for a member, on-chain value or member name."""
    try:
        return KeyType.parse(key_type)
    except ValueError:
        raise ValidationError("Type must be a valid signature type.")


def validate_controller(controller: Any) -> None:
    if not is_valid_did_id(controller):
        raise ValidationError("Controller must be a valid DID Id.")


def validate_priority(priority: Any) -> None:
    if not _is_non_negative_int(priority):
        raise ValidationError("Priority must be a non-negative integer.")


def validate_priority_requirement(priority_requirement: Optional[Any]) -> None:
    if priority_requirement is not None and not _is_non_negative_int(priority_requirement):
        raise ValidationError("Priority requirement must be a non-negative integer.")


def validate_service_endpoint(endpoint: Any) -> None:
    if not isinstance(endpoint, str) or SERVICE_ENDPOINT_PATTERN.fullmatch(endpoint) is None:
        raise ValidationError(
            "Endpoint must be a valid URL address starting with http:// or https://."
        )
