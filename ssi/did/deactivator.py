"""
DID Deactivation

Produces the signed DIDDeactivation entry. Only a management key of priority 0
can deactivate a DID, and the entry has no content: the signature covers the
entry type, schema version and signing key id only.
"""

import logging

from blockchain.entry import EntryData
from blockchain.signing import build_signed_entry
from ssi.enums import EntryType
from ssi.errors import InvariantError
from ssi.keys.management import ManagementKey

logger = logging.getLogger(__name__)


class DIDDeactivator:
    """
    Builds a DIDDeactivation entry.

    The signing key is chosen when the deactivator is created, so a DID
    without a priority-0 management key is rejected before anything is signed.

    Raises:
        InvariantError: If the DID has no management key of priority 0
    """

    def __init__(self, did_builder):
        self._did_builder = did_builder
        keys = did_builder.management_keys
        self._signing_key = min(keys, key=lambda k: k.priority) if keys else None

        if self._signing_key is None or self._signing_key.priority != 0:
            raise InvariantError(
                "Deactivation of a DID requires the availability of a management key with priority 0."
            )

    @property
    def signing_key(self) -> ManagementKey:
        return self._signing_key

    def export_entry_data(self) -> EntryData:
        logger.info(f"Deactivating {self._did_builder.id} with key {self._signing_key.alias!r}")
        return build_signed_entry(EntryType.Deactivation, self._signing_key, self._did_builder.id)
