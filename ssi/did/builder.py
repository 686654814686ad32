"""
DID Construction

DIDBuilder collects management keys, DID keys and services for a DID and
freezes them into an immutable DID. A built DID exports the DIDManagement
entry that creates it on-chain, and can be turned back into a builder to
update, upgrade or deactivate it.

Example:
    >>> did = DID.builder().mainnet().management_key("root", 0).build()
    >>> entry = did.export_entry_data()
    >>> entry.ext_ids[0]
    b'DIDManagement'
"""

import copy
import logging
import secrets
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from blockchain.entry import EntryData, calculate_chain_id, canonical_json, enforce_entry_size
from ssi.config import DEFAULT_SPEC_VERSION, DID_METHOD_NAME, ENTRY_SCHEMA_V100, NONCE_SIZE
from ssi.did.deactivator import DIDDeactivator
from ssi.did.updater import DIDUpdater
from ssi.did.upgrader import DIDVersionUpgrader
from ssi.enums import EntryType, KeyType, Network
from ssi.errors import DuplicateAliasError, InvariantError, ProtocolError
from ssi.keys.did_key import DIDKey, PurposeInput
from ssi.keys.management import ManagementKey
from ssi.service import Service
from ssi.validators import is_valid_did_id

logger = logging.getLogger(__name__)


def _copy_all(entities: Iterable) -> List:
    return [copy.copy(entity) for entity in entities]


@dataclass(frozen=True)
class DID:
    """
    Immutable snapshot of a DID produced by DIDBuilder.build().

    Use DID.builder() to create one; the collections are tuples so the
    snapshot cannot be changed through the builder that produced it.
    """

    id: str
    nonce: Optional[bytes]
    network: Network
    spec_version: str
    management_keys: Tuple[ManagementKey, ...] = ()
    did_keys: Tuple[DIDKey, ...] = ()
    services: Tuple[Service, ...] = ()

    @staticmethod
    def builder(
        did_id: Optional[str] = None,
        management_keys: Optional[Iterable[ManagementKey]] = None,
        did_keys: Optional[Iterable[DIDKey]] = None,
        services: Optional[Iterable[Service]] = None,
        spec_version: Optional[str] = None,
    ) -> "DIDBuilder":
        """
        Start building a new DID, or rehydrate an existing one.

        Args:
            did_id: Existing DID id; a fresh id is generated when omitted or invalid
            management_keys: Management keys already registered for the DID
            did_keys: DID keys already registered for the DID
            services: Services already registered for the DID
            spec_version: DID method spec version (defaults to DID_METHOD_SPEC_VERSION)

        Returns:
            A DIDBuilder
        """
        return DIDBuilder(did_id, management_keys, did_keys, services, spec_version)

    @property
    def chain_id(self) -> str:
        return self.id.split(":")[-1]

    def export_entry_data(self) -> EntryData:
        """
        Export the DIDManagement entry that records this DID on-chain.

        Returns:
            EntryData with ExtIDs [DIDManagement, 1.0.0, nonce] and the DID
            document as content

        Raises:
            InvariantError: If there is no management key, or none of priority 0
            ProtocolError: If the DID id was supplied rather than generated (no nonce)
            EntrySizeLimitError: If the document does not fit in one entry
        """
        if len(self.management_keys) < 1:
            raise InvariantError("The DID must have at least one management key.")

        if not any(k.priority == 0 for k in self.management_keys):
            raise InvariantError("At least one management key must have priority 0.")

        if self.nonce is None:
            raise ProtocolError(
                "Cannot export a DIDManagement entry for a DID whose id was not generated by this builder."
            )

        entry_data = EntryData(
            ext_ids=[
                EntryType.Create.value.encode("utf-8"),
                ENTRY_SCHEMA_V100.encode("utf-8"),
                self.nonce,
            ],
            content=canonical_json(self._build_did_document()).encode("utf-8"),
        )
        size = enforce_entry_size(
            entry_data,
            "You have exceeded the entry size limit! Please remove some of your keys or services.",
        )

        logger.info(f"Exported {EntryType.Create.value} entry for {self.id} ({size} bytes)")
        return entry_data

    def _build_did_document(self) -> dict:
        did_document = {
            "didMethodVersion": self.spec_version,
            "managementKey": [k.to_entry_obj(self.id) for k in self.management_keys],
        }
        if self.did_keys:
            did_document["didKey"] = [k.to_entry_obj(self.id) for k in self.did_keys]
        if self.services:
            did_document["service"] = [s.to_entry_obj(self.id) for s in self.services]
        return did_document

    def to_builder(self) -> "DIDBuilder":
        """Rehydrate a builder seeded with this DID's id, collections and spec version."""
        return DIDBuilder.from_did(self)


class DIDBuilder:
    """
    Mutable builder for a DID.

    Aliases of management keys and DID keys share one namespace; services
    have their own. Every add validates the new entity before appending it,
    so a failing call leaves the builder unchanged.
    """

    def __init__(
        self,
        did_id: Optional[str] = None,
        management_keys: Optional[Iterable[ManagementKey]] = None,
        did_keys: Optional[Iterable[DIDKey]] = None,
        services: Optional[Iterable[Service]] = None,
        spec_version: Optional[str] = None,
    ):
        self._nonce: Optional[bytes] = None

        if did_id and is_valid_did_id(did_id):
            self._id = did_id
        else:
            if did_id:
                logger.warning(f"Invalid DID id {did_id!r} supplied, generating a new one")
            self._id = self._generate_did_id()

        self.management_keys: List[ManagementKey] = list(management_keys or [])
        self.did_keys: List[DIDKey] = list(did_keys or [])
        self.services: List[Service] = list(services or [])
        self._network = self._get_network_from_id(self._id)
        self._spec_version = spec_version or DEFAULT_SPEC_VERSION

        self._used_key_aliases: Set[str] = set()
        self._used_service_aliases: Set[str] = set()

        for key in self.management_keys:
            self._check_alias_is_unique(self._used_key_aliases, key.alias)
        for key in self.did_keys:
            self._check_alias_is_unique(self._used_key_aliases, key.alias)
        for service in self.services:
            self._check_alias_is_unique(self._used_service_aliases, service.alias)

    @classmethod
    def from_did(cls, did: DID) -> "DIDBuilder":
        # the builder gets its own entity copies so nothing reaches back into the DID
        builder = cls(
            did.id,
            _copy_all(did.management_keys),
            _copy_all(did.did_keys),
            _copy_all(did.services),
            did.spec_version,
        )
        builder._nonce = did.nonce
        return builder

    @property
    def id(self) -> str:
        return self._id

    @property
    def nonce(self) -> Optional[bytes]:
        return self._nonce

    @property
    def network(self) -> Network:
        return self._network

    @property
    def spec_version(self) -> str:
        return self._spec_version

    @property
    def chain_id(self) -> str:
        """The chain ID where this DID is (or will be) stored."""
        return self._id.split(":")[-1]

    def update(self) -> DIDUpdater:
        """
        Start an update of the existing DID.

        Raises:
            InvariantError: If the DID has no management keys
        """
        if not self.management_keys:
            raise InvariantError("Cannot update DID without management keys.")
        return DIDUpdater(self)

    def deactivate(self) -> DIDDeactivator:
        """
        Start the deactivation of the existing DID.

        Raises:
            InvariantError: If the DID has no management key of priority 0
        """
        if not self.management_keys:
            raise InvariantError("Cannot deactivate DID without a management key of priority 0.")
        return DIDDeactivator(self)

    def upgrade_spec_version(self, new_version: str) -> DIDVersionUpgrader:
        """
        Start a method spec version upgrade of the existing DID.

        Raises:
            InvariantError: If the DID has no management keys
            ProtocolError: If new_version is not greater than the current version
        """
        if not self.management_keys:
            raise InvariantError("Cannot upgrade method spec version for DID without management keys.")
        return DIDVersionUpgrader(self, new_version)

    def set_network(self, network) -> "DIDBuilder":
        """Rewrite the id for the given network, keeping the chain ID."""
        self._network = Network.parse(network)
        if self._network is Network.Unspecified:
            self._id = f"{DID_METHOD_NAME}:{self.chain_id}"
        else:
            self._id = f"{DID_METHOD_NAME}:{self._network.value}:{self.chain_id}"
        return self

    def mainnet(self) -> "DIDBuilder":
        return self.set_network(Network.Mainnet)

    def testnet(self) -> "DIDBuilder":
        return self.set_network(Network.Testnet)

    def management_key(
        self,
        alias: str,
        priority: int,
        key_type=KeyType.EdDSA,
        controller: Optional[str] = None,
        priority_requirement: Optional[int] = None,
    ) -> "DIDBuilder":
        """
        Create a new management key for the DID.

        Args:
            alias: Nickname for the key, unique across the DID's keys
            priority: Hierarchical level of the key; 0 is the highest
            key_type: Signature type (KeyType member, value or name)
            controller: DID controlling the key, defaults to this DID
            priority_requirement: Minimum priority needed to revoke the key

        Returns:
            This builder
        """
        key = ManagementKey(alias, priority, key_type, controller or self._id, priority_requirement)
        self._check_alias_is_unique(self._used_key_aliases, key.alias)
        self.management_keys.append(key)
        return self

    add_management_key = management_key

    def did_key(
        self,
        alias: str,
        purpose: PurposeInput,
        key_type=KeyType.EdDSA,
        controller: Optional[str] = None,
        priority_requirement: Optional[int] = None,
    ) -> "DIDBuilder":
        """
        Create a new DID key for the DID.

        Args:
            alias: Nickname for the key, unique across the DID's keys
            purpose: publicKey, authenticationKey or both
            key_type: Signature type (KeyType member, value or name)
            controller: DID controlling the key, defaults to this DID
            priority_requirement: Minimum priority needed to revoke the key

        Returns:
            This builder
        """
        key = DIDKey(alias, purpose, key_type, controller or self._id, priority_requirement)
        self._check_alias_is_unique(self._used_key_aliases, key.alias)
        self.did_keys.append(key)
        return self

    add_did_key = did_key
    add_application_key = did_key

    def service(
        self,
        alias: str,
        service_type: str,
        endpoint: str,
        priority_requirement: Optional[int] = None,
        custom_fields: Optional[dict] = None,
    ) -> "DIDBuilder":
        """Add a new service to the DID document."""
        service = Service(alias, service_type, endpoint, priority_requirement, custom_fields)
        self._check_alias_is_unique(self._used_service_aliases, service.alias)
        self.services.append(service)
        return self

    add_service = service

    def build(self) -> DID:
        return DID(
            id=self._id,
            nonce=self._nonce,
            network=self._network,
            spec_version=self._spec_version,
            management_keys=tuple(_copy_all(self.management_keys)),
            did_keys=tuple(_copy_all(self.did_keys)),
            services=tuple(_copy_all(self.services)),
        )

    def _generate_did_id(self) -> str:
        self._nonce = secrets.token_bytes(NONCE_SIZE)
        chain_id = calculate_chain_id([EntryType.Create.value, ENTRY_SCHEMA_V100, self._nonce])
        did_id = f"{DID_METHOD_NAME}:{chain_id}"
        logger.info(f"Generated new DID id {did_id}")
        return did_id

    @staticmethod
    def _check_alias_is_unique(used_aliases: Set[str], alias: str) -> None:
        if alias in used_aliases:
            raise DuplicateAliasError(alias)
        used_aliases.add(alias)
        logger.debug(f"Registered alias {alias!r}")

    @staticmethod
    def _get_network_from_id(did_id: str) -> Network:
        parts = did_id.split(":")
        if len(parts) == 4:
            return Network.parse(parts[2])
        return Network.Unspecified
