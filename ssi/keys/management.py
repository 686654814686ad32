"""
Management Keys

Keys authorised to sign updates to a DID. Priority 0 is the highest
authority; a DID stays valid only while it holds at least one priority-0
management key.
"""

from typing import Any, Dict, Optional, Tuple, Union

from ssi.config import ENTRY_SCHEMA_V100
from ssi.enums import KeyType
from ssi.keys.abstract import AbstractDIDKey
from ssi.validators import validate_priority


class ManagementKey(AbstractDIDKey):
    """
    A key used to sign updates for an existing DID.

    Args:
        alias: Human-readable nickname for the key
        priority: Non-negative hierarchical level; lower values override higher ones
        key_type: Signature type of the key pair (default Ed25519)
        controller: DID id of the controlling entity
        priority_requirement: Minimum priority needed to revoke this key
        public_key: Optional encoded public key
        private_key: Optional encoded private key

    Example:
        >>> key = ManagementKey("my-key", 0, KeyType.EdDSA, "did:factom:" + "a" * 64)
        >>> key.to_entry_obj("did:factom:" + "a" * 64)["priority"]
        0
    """

    def __init__(
        self,
        alias: str,
        priority: int,
        key_type=KeyType.EdDSA,
        controller: str = None,
        priority_requirement: Optional[int] = None,
        public_key: Union[str, bytes, None] = None,
        private_key: Union[str, bytes, None] = None,
    ):
        validate_priority(priority)
        super().__init__(alias, key_type, controller, priority_requirement, public_key, private_key)
        self.priority = priority

    def to_entry_obj(self, did_id: str, version: str = ENTRY_SCHEMA_V100) -> Dict[str, Any]:
        entry_obj = super().to_entry_obj(did_id, version)
        entry_obj["priority"] = self.priority
        return entry_obj

    def _snapshot(self) -> Tuple:
        return super()._snapshot() + (self.priority,)
