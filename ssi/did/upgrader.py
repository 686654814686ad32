"""
DID Method Version Upgrade

Produces the signed DIDMethodVersionUpgrade entry that moves a DID to a newer
version of the DID method spec.
"""

import logging
import re
from typing import Tuple

from blockchain.entry import EntryData, canonical_json
from blockchain.signing import build_signed_entry
from ssi.enums import EntryType
from ssi.errors import InvariantError, ProtocolError, ValidationError

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"\d+(\.\d+)*")


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Parse a dotted version string such as "0.2.0".

    Raises:
        ValidationError: If the string is not dot-separated non-negative integers
    """
    if not isinstance(version, str) or not VERSION_PATTERN.fullmatch(version):
        raise ValidationError(f"Invalid method spec version: {version!r}")
    return tuple(int(part) for part in version.split("."))


def is_version_upgrade(new_version: str, old_version: str) -> bool:
    """True if new_version is strictly greater; missing trailing parts count as 0."""
    new, old = parse_version(new_version), parse_version(old_version)
    width = max(len(new), len(old))
    return new + (0,) * (width - len(new)) > old + (0,) * (width - len(old))


class DIDVersionUpgrader:
    """
    Builds a DIDMethodVersionUpgrade entry.

    Args:
        did_builder: Builder of the DID to upgrade
        new_spec_version: Version to upgrade to

    Raises:
        ProtocolError: If new_spec_version is missing or not an upgrade
        ValidationError: If a version string cannot be parsed
    """

    def __init__(self, did_builder, new_spec_version: str):
        if not new_spec_version or not is_version_upgrade(new_spec_version, did_builder.spec_version):
            raise ProtocolError("New version must be an upgrade on old version")

        self._did_builder = did_builder
        self._new_spec_version = new_spec_version

    @property
    def new_spec_version(self) -> str:
        return self._new_spec_version

    def export_entry_data(self) -> EntryData:
        """
        Export the upgrade entry, signed by the current management key with
        the lowest priority number.

        Returns:
            EntryData with content {"didMethodVersion": <new version>}
        """
        if not self._did_builder.management_keys:
            raise InvariantError("Cannot upgrade method spec version for DID without management keys.")

        signing_key = min(self._did_builder.management_keys, key=lambda k: k.priority)
        entry_data = build_signed_entry(
            EntryType.VersionUpgrade,
            signing_key,
            self._did_builder.id,
            canonical_json({"didMethodVersion": self._new_spec_version}),
        )
        logger.info(
            f"Upgrading {self._did_builder.id} from method spec version "
            f"{self._did_builder.spec_version} to {self._new_spec_version}"
        )
        return entry_data
