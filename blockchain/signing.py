"""
Entry Signing

The hash-then-sign routine shared by update, upgrade and deactivation
entries. The signed data is the concatenation (no delimiter) of the entry
type tag, the schema version, the full id of the signing key and, except for
deactivations, the JSON content. Its SHA-256 digest is passed to the key,
which hashes again as part of its own signing scheme.
"""

import hashlib
import logging
from typing import Tuple

from blockchain.entry import EntryData, enforce_entry_size
from ssi.config import ENTRY_SCHEMA_V100
from ssi.enums import EntryType
from ssi.errors import SignatureFormatError

logger = logging.getLogger(__name__)


def signed_data(entry_type: EntryType, signing_key_id: str, content: str = "") -> bytes:
    """
    Build the digest that gets signed for an entry.

    Args:
        entry_type: Entry type tag (ExtID[0])
        signing_key_id: Full id of the signing key, "<did>#<alias>"
        content: Entry content as text ("" for deactivation)

    Returns:
        32-byte SHA-256 digest of the concatenated fields
    """
    data = "".join((EntryType.parse(entry_type).value, ENTRY_SCHEMA_V100, signing_key_id, content))
    return hashlib.sha256(data.encode("utf-8")).digest()


def sign_entry(entry_type: EntryType, signing_key, did_id: str, content: str = "") -> Tuple[str, bytes]:
    """
    Sign entry data with a DID key.

    Args:
        entry_type: Entry type tag
        signing_key: ManagementKey (or any key with full_id and sign)
        did_id: DID the entry is for
        content: Entry content as text

    Returns:
        Tuple of (signing_key_id, signature)
    """
    signing_key_id = signing_key.full_id(did_id)
    signature = signing_key.sign(signed_data(entry_type, signing_key_id, content))
    return signing_key_id, signature


def build_signed_entry(
    entry_type: EntryType,
    signing_key,
    did_id: str,
    content: str = "",
    size_error: str = "You have exceeded the entry size limit!",
) -> EntryData:
    """
    Produce a signed entry: ExtIDs [type, schema, signing key id, signature].

    Raises:
        EntrySizeLimitError: If the entry does not fit the size limit
    """
    entry_type = EntryType.parse(entry_type)
    signing_key_id, signature = sign_entry(entry_type, signing_key, did_id, content)
    entry_data = EntryData(
        ext_ids=[
            entry_type.value.encode("utf-8"),
            ENTRY_SCHEMA_V100.encode("utf-8"),
            signing_key_id.encode("utf-8"),
            bytes(signature),
        ],
        content=content.encode("utf-8"),
    )
    size = enforce_entry_size(entry_data, size_error)
    logger.info(f"Exported {entry_type.value} entry for {did_id} ({size} bytes)")
    return entry_data


def verify_entry_signature(entry_data: EntryData, key, content_signed: bool = True) -> bool:
    """
    Check the signature of an exported update, upgrade or deactivation entry.

    Args:
        entry_data: Entry with ExtIDs [type, schema, signing key id, signature]
        key: Key whose public part should have produced the signature
        content_signed: False when the signature does not cover the content

    Returns:
        True if ExtID[3] is a valid signature by `key`, False otherwise
        (including malformed signatures and entries of the wrong shape)
    """
    if len(entry_data.ext_ids) != 4:
        return False
    entry_type_tag, schema, signing_key_id, signature = entry_data.ext_ids
    if schema != ENTRY_SCHEMA_V100.encode("utf-8"):
        return False

    # UnicodeDecodeError is a ValueError too
    try:
        entry_type = EntryType.parse(entry_type_tag.decode("utf-8"))
        content = entry_data.content.decode("utf-8") if content_signed else ""
        digest = signed_data(entry_type, signing_key_id.decode("utf-8"), content)
    except ValueError:
        return False

    try:
        return key.verify(digest, signature)
    except SignatureFormatError:
        return False
