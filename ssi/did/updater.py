"""
DID Update Protocol

DIDUpdater records the DID's keys and services when it is created and lets
the caller add, revoke and rotate them through the builder it wraps. At
export time the original and current collections are compared and the
differences are written into a signed DIDUpdate entry:

    {"add": {"managementKey": [...], "didKey": [...], "service": [...]},
     "revoke": {"managementKey": [{"id": ...}], "didKey": [{"id": ..., "purpose": [...]}], ...}}

Empty sections are omitted. Revoke entries carry only the id (plus the
revoked purpose for single-purpose revocations), so a rotated key, which
keeps its alias, is only listed under "add".
"""

import copy
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from blockchain.entry import EntryData, canonical_json
from blockchain.signing import build_signed_entry
from ssi.enums import DIDKeyPurpose, EntryType, KeyType
from ssi.errors import InvariantError, ProtocolError, ValidationError
from ssi.keys.did_key import DIDKey, PurposeInput
from ssi.keys.management import ManagementKey
from ssi.service import Service

logger = logging.getLogger(__name__)


def _diff(original: Sequence, current: Sequence) -> Tuple[List, List]:
    """
    Compare two collections of keys or services.

    Returns:
        Tuple of (new, revoked): entities of `current` not present in
        `original`, and entities of `original` that are neither present in
        `current` nor replaced by an entity with the same alias
    """
    # equality covers key material, so a rotated key counts as new
    new = [entity for entity in current if entity not in original]
    # a rotated key keeps its alias and must not be revoked as well
    current_aliases = {entity.alias for entity in current}
    revoked = [
        entity
        for entity in original
        if entity not in current and entity.alias not in current_aliases
    ]
    return new, revoked


class DIDUpdater:
    """
    Builds a DIDUpdate entry for an existing DID.

    Obtain one through DIDBuilder.update(). All mutators return the updater
    so calls can be chained.

    Example:
        >>> entry = (
        ...     did.to_builder()
        ...     .update()
        ...     .add_management_key("backup", 1)
        ...     .revoke_service("old-inbox")
        ...     .export_entry_data()
        ... )
    """

    def __init__(self, did_builder):
        self._did_builder = did_builder
        # copies: rotating a current key in place must not change the snapshot
        self._original_management_keys: List[ManagementKey] = [
            copy.copy(k) for k in did_builder.management_keys
        ]
        self._original_did_keys: List[DIDKey] = [copy.copy(k) for k in did_builder.did_keys]
        self._original_services: List[Service] = [copy.copy(s) for s in did_builder.services]
        self._did_key_purposes_to_revoke: Dict[str, DIDKeyPurpose] = {}

    @property
    def original_management_keys(self) -> List[ManagementKey]:
        return list(self._original_management_keys)

    @property
    def original_did_keys(self) -> List[DIDKey]:
        return list(self._original_did_keys)

    @property
    def original_services(self) -> List[Service]:
        return list(self._original_services)

    @property
    def management_keys(self) -> List[ManagementKey]:
        return list(self._did_builder.management_keys)

    @property
    def did_keys(self) -> List[DIDKey]:
        """Current DID keys, with pending purpose revocations applied."""
        did_keys = []
        for key in self._did_builder.did_keys:
            revoked_purpose = self._did_key_purposes_to_revoke.get(key.alias)
            if revoked_purpose is None:
                did_keys.append(key)
            else:
                did_keys.append(key.with_purpose(revoked_purpose.complement))
        return did_keys

    @property
    def services(self) -> List[Service]:
        return list(self._did_builder.services)

    @property
    def did_key_purposes_to_revoke(self) -> Dict[str, DIDKeyPurpose]:
        return dict(self._did_key_purposes_to_revoke)

    def add_management_key(
        self,
        alias: str,
        priority: int,
        key_type=KeyType.EdDSA,
        controller: Optional[str] = None,
        priority_requirement: Optional[int] = None,
    ) -> "DIDUpdater":
        self._did_builder.management_key(alias, priority, key_type, controller, priority_requirement)
        return self

    def add_did_key(
        self,
        alias: str,
        purpose: PurposeInput,
        key_type=KeyType.EdDSA,
        controller: Optional[str] = None,
        priority_requirement: Optional[int] = None,
    ) -> "DIDUpdater":
        self._did_builder.did_key(alias, purpose, key_type, controller, priority_requirement)
        return self

    def add_service(
        self,
        alias: str,
        service_type: str,
        endpoint: str,
        priority_requirement: Optional[int] = None,
        custom_fields: Optional[dict] = None,
    ) -> "DIDUpdater":
        self._did_builder.service(alias, service_type, endpoint, priority_requirement, custom_fields)
        return self

    def revoke_management_key(self, alias: str) -> "DIDUpdater":
        """Revoke a management key. Unknown aliases are ignored."""
        keys = self._did_builder.management_keys
        if not any(k.alias == alias for k in keys):
            logger.debug(f"No management key {alias!r} to revoke")
            return self
        self._did_builder.management_keys = [k for k in keys if k.alias != alias]
        logger.debug(f"Revoking management key {alias!r}")
        return self

    def revoke_did_key(self, alias: str) -> "DIDUpdater":
        """Revoke a DID key with all its purposes. Unknown aliases are ignored."""
        keys = self._did_builder.did_keys
        if not any(k.alias == alias for k in keys):
            logger.debug(f"No DID key {alias!r} to revoke")
            return self
        self._did_builder.did_keys = [k for k in keys if k.alias != alias]
        self._did_key_purposes_to_revoke.pop(alias, None)
        logger.debug(f"Revoking DID key {alias!r}")
        return self

    def revoke_did_key_purpose(self, alias: str, purpose) -> "DIDUpdater":
        """
        Revoke a single purpose of a DID key.

        The key keeps its alias and key material and serves only the other
        purpose from then on. Revoking the last remaining purpose revokes the
        whole key. Unknown aliases and purposes the key does not have are
        ignored.

        Raises:
            ValidationError: If purpose is not a DIDKeyPurpose
        """
        try:
            purpose = DIDKeyPurpose.parse(purpose)
        except ValueError:
            raise ValidationError(f"Invalid DID key purpose: {purpose!r}")

        did_key = next((k for k in self._did_builder.did_keys if k.alias == alias), None)
        if did_key is None or purpose not in did_key.purpose:
            logger.debug(f"DID key {alias!r} has no purpose {purpose.value} to revoke")
            return self

        pending = self._did_key_purposes_to_revoke.get(alias)
        if len(did_key.purpose) == 1 or (pending is not None and pending is not purpose):
            return self.revoke_did_key(alias)

        self._did_key_purposes_to_revoke[alias] = purpose
        logger.debug(f"Revoking purpose {purpose.value} of DID key {alias!r}")
        return self

    def revoke_service(self, alias: str) -> "DIDUpdater":
        """Revoke a service. Unknown aliases are ignored."""
        services = self._did_builder.services
        if not any(s.alias == alias for s in services):
            logger.debug(f"No service {alias!r} to revoke")
            return self
        self._did_builder.services = [s for s in services if s.alias != alias]
        logger.debug(f"Revoking service {alias!r}")
        return self

    def rotate_management_key(self, alias: str) -> "DIDUpdater":
        """
        Replace the key pair of a management key, keeping its other fields.

        Raises:
            MissingPrivateKeyError: If the key has no private key
        """
        self._did_builder.management_keys = self._rotate(self._did_builder.management_keys, alias)
        return self

    def rotate_did_key(self, alias: str) -> "DIDUpdater":
        """
        Replace the key pair of a DID key, keeping its other fields.

        Raises:
            MissingPrivateKeyError: If the key has no private key
        """
        self._did_builder.did_keys = self._rotate(self._did_builder.did_keys, alias)
        return self

    @staticmethod
    def _rotate(keys: List, alias: str) -> List:
        for index, key in enumerate(keys):
            if key.alias == alias:
                rotated = list(keys)
                rotated[index] = key.rotated()
                logger.debug(f"Rotated key {alias!r}")
                return rotated
        logger.debug(f"No key {alias!r} to rotate")
        return keys

    @property
    def required_signing_priority(self) -> Optional[int]:
        """
        Lowest priority number implicated by the pending changes.

        Added management keys contribute their priority. Revoked keys and
        services contribute their priority requirement, or the priority of a
        revoked management key without one. None when nothing is implicated.
        The value is informational and is not enforced on export.
        """
        new_management_keys, revoked_management_keys = _diff(
            self._original_management_keys, self._did_builder.management_keys
        )
        _, revoked_did_keys = _diff(self._original_did_keys, self._did_builder.did_keys)
        _, revoked_services = _diff(self._original_services, self._did_builder.services)

        priorities = [k.priority for k in new_management_keys]
        for key in revoked_management_keys:
            priorities.append(
                key.priority_requirement if key.priority_requirement is not None else key.priority
            )
        for entity in revoked_did_keys + revoked_services:
            if entity.priority_requirement is not None:
                priorities.append(entity.priority_requirement)
        for key in self._did_builder.did_keys:
            if key.alias in self._did_key_purposes_to_revoke and key.priority_requirement is not None:
                priorities.append(key.priority_requirement)

        return min(priorities) if priorities else None

    def export_entry_data(self) -> EntryData:
        """
        Export the signed DIDUpdate entry.

        The entry is signed with the original management key of the lowest
        priority number, i.e. a key that is already recorded on-chain.

        Returns:
            EntryData with ExtIDs [DIDUpdate, 1.0.0, signing key id, signature]

        Raises:
            InvariantError: If no management key of priority 0 would remain
            ProtocolError: If nothing was changed
            EntrySizeLimitError: If the update does not fit in one entry
        """
        if not any(k.priority == 0 for k in self._did_builder.management_keys):
            raise InvariantError("DIDUpdate entry would leave no management keys of priority zero.")

        did_id = self._did_builder.id
        # (section name, original, current) in the order they appear on-chain
        sections = (
            ("managementKey", self._original_management_keys, self._did_builder.management_keys),
            ("didKey", self._original_did_keys, self._did_builder.did_keys),
            ("service", self._original_services, self._did_builder.services),
        )

        add_object = {}
        revoke_object = {}
        for name, original, current in sections:
            new, revoked = _diff(original, current)
            if new:
                add_object[name] = [entity.to_entry_obj(did_id) for entity in new]
            if revoked:
                revoke_object[name] = [{"id": entity.full_id(did_id)} for entity in revoked]

        # keys losing one purpose stay in both lists, so they are not in the diff
        for alias, purpose in self._did_key_purposes_to_revoke.items():
            revoke_object.setdefault("didKey", []).append(
                {"id": f"{did_id}#{alias}", "purpose": [purpose.value]}
            )

        update_entry_content = {}
        if add_object:
            update_entry_content["add"] = add_object
        if revoke_object:
            update_entry_content["revoke"] = revoke_object

        if not update_entry_content:
            raise ProtocolError("The are no changes made to the DID.")

        # sign with a key that is already on-chain
        signing_key = min(self._original_management_keys, key=lambda k: k.priority)
        logger.debug(
            f"Update of {did_id} requires priority {self.required_signing_priority}, "
            f"signing with {signing_key.alias!r} (priority {signing_key.priority})"
        )

        return build_signed_entry(
            EntryType.Update,
            signing_key,
            did_id,
            canonical_json(update_entry_content),
            "You have exceeded the entry size limit!",
        )
