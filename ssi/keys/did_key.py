"""
DID Keys

Application-level keys ("DID keys") used for authentication, signing
requests, encryption and so on. Each key serves one or both of the
publicKey and authenticationKey purposes.
"""

import copy
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ssi.config import ENTRY_SCHEMA_V100
from ssi.enums import DIDKeyPurpose, KeyType
from ssi.errors import ValidationError
from ssi.keys.abstract import AbstractDIDKey

PurposeInput = Union[DIDKeyPurpose, str, Iterable[Union[DIDKeyPurpose, str]]]


def parse_purposes(purpose: PurposeInput) -> List[DIDKeyPurpose]:
    """
    Normalise a single purpose or a list of purposes.

    Returns:
        List of one or two distinct DIDKeyPurpose members, in the given order

    Raises:
        ValidationError: On unknown values, repeats, or an empty/oversized list
    """
    if isinstance(purpose, (DIDKeyPurpose, str)):
        raw = [purpose]
    else:
        try:
            raw = list(purpose)
        except TypeError:
            raise ValidationError("Invalid purpose type.")

    try:
        purposes = [DIDKeyPurpose.parse(p) for p in raw]
    except ValueError:
        raise ValidationError("Purpose must contain only valid DIDKeyPurpose values.")

    if len(set(purposes)) != len(purposes) or len(purposes) not in (1, 2):
        raise ValidationError(
            f"Purpose must contain one or both of {DIDKeyPurpose.PublicKey.value} and "
            f"{DIDKeyPurpose.AuthenticationKey.value} without repeated values"
        )
    return purposes


class DIDKey(AbstractDIDKey):
    """
    Application-level key of a DID.

    Args:
        alias: Human-readable nickname for the key
        purpose: DIDKeyPurpose (or list of them) the key serves
        key_type: Signature type of the key pair (default Ed25519)
        controller: DID id of the controlling entity
        priority_requirement: Minimum priority needed to revoke this key
        public_key: Optional encoded public key
        private_key: Optional encoded private key
    """

    def __init__(
        self,
        alias: str,
        purpose: PurposeInput,
        key_type=KeyType.EdDSA,
        controller: str = None,
        priority_requirement: Optional[int] = None,
        public_key: Union[str, bytes, None] = None,
        private_key: Union[str, bytes, None] = None,
    ):
        purposes = parse_purposes(purpose)
        super().__init__(alias, key_type, controller, priority_requirement, public_key, private_key)
        self.purpose = purposes

    def with_purpose(self, purpose: PurposeInput) -> "DIDKey":
        """Return a copy serving only the given purpose(s), sharing this key's material."""
        clone = copy.copy(self)
        clone.purpose = parse_purposes(purpose)
        return clone

    def to_entry_obj(self, did_id: str, version: str = ENTRY_SCHEMA_V100) -> Dict[str, Any]:
        entry_obj = super().to_entry_obj(did_id, version)
        entry_obj["purpose"] = [p.value for p in self.purpose]
        return entry_obj

    def _snapshot(self) -> Tuple:
        return super()._snapshot() + (tuple(self.purpose),)


ApplicationKey = DIDKey
