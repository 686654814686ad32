"""
Common DID Key Entity

Fields and behaviour shared by management keys and DID (application) keys:
alias, key type, controller, optional priority requirement and the
underlying algorithm adapter that holds the key material.
"""

import copy
from typing import Any, Dict, Optional, Tuple, Union

from ssi.config import ENTRY_SCHEMA_V100
from ssi.errors import MissingPrivateKeyError, UnknownSchemaVersionError
from ssi.keys.adapters import SigningKeyAdapter, create_adapter
from ssi.validators import (
    validate_alias,
    validate_controller,
    validate_key_type,
    validate_priority_requirement,
)


class AbstractDIDKey:
    """
    Base for keys that appear in a DID document.

    Args:
        alias: Human-readable nickname, unique among the DID's keys
        key_type: KeyType member, value or name
        controller: DID id of the entity controlling the key
        priority_requirement: Minimum priority a management key needs to revoke this key
        public_key: Optional encoded public key
        private_key: Optional encoded private key
    """

    def __init__(
        self,
        alias: str,
        key_type,
        controller: str,
        priority_requirement: Optional[int] = None,
        public_key: Union[str, bytes, None] = None,
        private_key: Union[str, bytes, None] = None,
    ):
        validate_alias(alias)
        key_type = validate_key_type(key_type)
        validate_controller(controller)
        validate_priority_requirement(priority_requirement)

        self.alias = alias
        self.key_type = key_type
        self.controller = controller
        self.priority_requirement = priority_requirement
        self._underlying_key: SigningKeyAdapter = create_adapter(key_type, public_key, private_key)

    @property
    def public_key(self) -> str:
        return self._underlying_key.public_key

    @property
    def private_key(self) -> Optional[str]:
        return self._underlying_key.private_key

    @property
    def verifying_key(self):
        return self._underlying_key.verifying_key

    @property
    def signing_key(self):
        return self._underlying_key.signing_key

    def sign(self, message: Union[str, bytes]) -> bytes:
        """Sign a message; it is hashed with SHA-256 by the algorithm adapter."""
        return self._underlying_key.sign(message)

    def verify(self, message: Union[str, bytes], signature: bytes) -> bool:
        return self._underlying_key.verify(message, signature)

    def full_id(self, did_id: str) -> str:
        return f"{did_id}#{self.alias}"

    def to_entry_obj(self, did_id: str, version: str = ENTRY_SCHEMA_V100) -> Dict[str, Any]:
        """
        Build the object recorded on-chain for this key.

        Args:
            did_id: The DID the key belongs to (may differ from the controller)
            version: Entry schema version

        Returns:
            Dict with id, type, controller, the public key under
            publicKeyBase58 or publicKeyPem, and priorityRequirement if set

        Raises:
            UnknownSchemaVersionError: For any version other than 1.0.0
        """
        if version != ENTRY_SCHEMA_V100:
            raise UnknownSchemaVersionError(version)

        entry_obj = {
            "id": self.full_id(did_id),
            "type": self.key_type.value,
            "controller": self.controller,
            self._underlying_key.on_chain_pub_key_name: self.public_key,
        }
        if self.priority_requirement is not None:
            entry_obj["priorityRequirement"] = self.priority_requirement
        return entry_obj

    def rotate(self) -> None:
        """
        Replace the key pair with a freshly generated one of the same type.

        Raises:
            MissingPrivateKeyError: If the current key has no private part
        """
        if self.private_key is None:
            raise MissingPrivateKeyError("Private key must be set.")
        self._underlying_key = create_adapter(self.key_type)

    def rotated(self):
        """Return a copy of this key with a new key pair, leaving this key untouched."""
        clone = copy.copy(self)
        clone.rotate()
        return clone

    def _snapshot(self) -> Tuple:
        return (
            type(self),
            self.alias,
            self.key_type,
            self.controller,
            self.priority_requirement,
            self.public_key,
            self.private_key,
        )

    def __eq__(self, other):
        if not isinstance(other, AbstractDIDKey):
            return NotImplemented
        return self._snapshot() == other._snapshot()

    __hash__ = None

    def __repr__(self):
        return (
            f"{type(self).__name__}(alias={self.alias!r}, key_type={self.key_type.name}, "
            f"controller={self.controller!r})"
        )
