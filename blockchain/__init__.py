"""Chain entry construction: chain IDs, size limits and entry signing."""

from blockchain.entry import (
    EntryData,
    calculate_chain_id,
    calculate_entry_size,
    canonical_json,
    enforce_entry_size,
)
from blockchain.signing import build_signed_entry, sign_entry, signed_data, verify_entry_signature
