"""
Chain Entry Primitives

Chain ID derivation, entry size accounting and the canonical JSON encoding
used for entry content. An entry is a list of ExtIDs (short byte strings the
chain indexes without parsing the content) plus a content buffer.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

from ssi.config import ENTRY_HEADER_SIZE, ENTRY_SIZE_LIMIT, EXT_ID_LENGTH_PREFIX_SIZE
from ssi.errors import EntrySizeLimitError

logger = logging.getLogger(__name__)

ExtId = Union[str, bytes]


def _as_bytes(value: ExtId) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass
class EntryData:
    """ExtIDs and content of an entry ready to be submitted to the chain."""

    ext_ids: List[bytes] = field(default_factory=list)
    content: bytes = b""

    @property
    def size(self) -> int:
        return calculate_entry_size(self.ext_ids, self.content)

    def as_dict(self) -> Dict[str, Any]:
        return {"extIds": list(self.ext_ids), "content": self.content}


def calculate_chain_id(ext_ids: Sequence[ExtId]) -> str:
    """
    Calculate the chain ID for the first entry of a chain.

    Each ExtID is hashed with SHA-256, the digests are concatenated in order
    and the concatenation is hashed again.

    Args:
        ext_ids: ExtIDs of the chain's first entry (text is UTF-8 encoded)

    Returns:
        64-character lowercase hex chain ID

    Example:
        >>> calculate_chain_id(["DIDManagement", "1.0.0", bytes(32)])
        '...'  # 64 hex characters
    """
    digests = b"".join(hashlib.sha256(_as_bytes(ext_id)).digest() for ext_id in ext_ids)
    return hashlib.sha256(digests).hexdigest()


def calculate_entry_size(ext_ids: Sequence[ExtId], content: Union[str, bytes]) -> int:
    """
    Calculate the size of an entry in bytes.

    Returns:
        Fixed header + 2 bytes per ExtID + ExtID lengths + content length
    """
    total = ENTRY_HEADER_SIZE + EXT_ID_LENGTH_PREFIX_SIZE * len(ext_ids)
    total += sum(len(_as_bytes(ext_id)) for ext_id in ext_ids)
    total += len(_as_bytes(content))
    return total


def enforce_entry_size(
    entry_data: EntryData,
    message: str = "You have exceeded the entry size limit!",
    limit: int = ENTRY_SIZE_LIMIT,
) -> int:
    """
    Reject entries larger than the size limit.

    Returns:
        The entry size in bytes

    Raises:
        EntrySizeLimitError: If the entry is larger than `limit`
    """
    size = entry_data.size
    if size > limit:
        logger.debug(f"Entry of {size} bytes exceeds the {limit} byte limit")
        raise EntrySizeLimitError(message, size=size, limit=limit)
    return size


def canonical_json(obj: Any) -> str:
    """
    Serialize entry content.

    Compact separators, insertion-ordered keys and raw UTF-8 text, so the
    output is byte-for-byte what the other DID tooling on the chain produces.
    """
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
