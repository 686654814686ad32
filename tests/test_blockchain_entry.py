"""
Chain Entry Tests

Tests chain ID derivation, entry size accounting, content encoding and the
shared entry signing routine.
"""

import hashlib

import pytest

from blockchain.entry import (
    EntryData,
    calculate_chain_id,
    calculate_entry_size,
    canonical_json,
    enforce_entry_size,
)
from blockchain.signing import build_signed_entry, signed_data, verify_entry_signature
from ssi.enums import EntryType, KeyType
from ssi.errors import EntrySizeLimitError
from ssi.keys.management import ManagementKey


class TestChainId:
    """Test chain ID derivation"""

    def test_known_chain_id(self):
        """sha256(sha256(ext_id_0) || sha256(ext_id_1) || ...)"""
        chain_id = calculate_chain_id([b"DIDManagement", b"1.0.0", bytes(32)])
        assert chain_id == "8a8a9b9e774af063469033b90eb54c930f7137b597cd9c1987c29394baaabcb0"

    def test_text_and_bytes_are_equivalent(self):
        nonce = bytes(range(32))
        assert calculate_chain_id(["DIDManagement", "1.0.0", nonce]) == calculate_chain_id(
            [b"DIDManagement", b"1.0.0", nonce]
        )

    def test_any_change_changes_chain_id(self):
        base = calculate_chain_id([b"DIDManagement", b"1.0.0", bytes(32)])
        assert calculate_chain_id([b"DIDManagement", b"1.0.0", b"\x01" + bytes(31)]) != base
        assert calculate_chain_id([b"DIDManagement", b"1.0.1", bytes(32)]) != base
        assert calculate_chain_id([b"1.0.0", b"DIDManagement", bytes(32)]) != base

    def test_chain_id_format(self):
        chain_id = calculate_chain_id([b"a"])
        assert len(chain_id) == 64
        assert chain_id == chain_id.lower()


class TestEntrySize:
    """Test entry size arithmetic and the size ceiling"""

    def test_entry_size(self):
        # 35 header + 2 * 2 length prefixes + 3 bytes of ExtIDs + 3 bytes of content
        assert calculate_entry_size([b"a", b"bc"], b"def") == 45

    def test_empty_entry(self):
        assert calculate_entry_size([], b"") == 35

    def test_multibyte_text_counts_encoded_bytes(self):
        assert calculate_entry_size([], "é") == 37

    def test_entry_data_size(self):
        entry_data = EntryData(ext_ids=[b"a", b"bc"], content=b"def")
        assert entry_data.size == 45
        assert entry_data.as_dict() == {"extIds": [b"a", b"bc"], "content": b"def"}

    def test_enforce_within_limit(self):
        entry_data = EntryData(ext_ids=[b"a"], content=b"x" * 10)
        assert enforce_entry_size(entry_data, limit=48) == 48

    def test_enforce_over_limit(self):
        entry_data = EntryData(ext_ids=[b"a"], content=b"x" * 10)
        with pytest.raises(EntrySizeLimitError, match="Too big") as exc_info:
            enforce_entry_size(entry_data, "Too big", limit=47)
        assert exc_info.value.size == 48
        assert exc_info.value.limit == 47


class TestCanonicalJson:
    """Test the content encoding"""

    def test_compact_and_ordered(self):
        assert canonical_json({"b": 1, "a": [1, 2], "c": {"d": None}}) == '{"b":1,"a":[1,2],"c":{"d":null}}'

    def test_non_ascii_is_kept(self):
        assert canonical_json({"name": "café"}) == '{"name":"café"}'


class TestEntrySigning:
    """Test signed-data construction and signature verification"""

    @pytest.fixture
    def signing_key(self, did_id):
        return ManagementKey("signing-key", 0, KeyType.EdDSA, did_id)

    def test_signed_data(self, did_id):
        key_id = f"{did_id}#signing-key"
        expected = hashlib.sha256(f"DIDUpdate1.0.0{key_id}{{}}".encode()).digest()
        assert signed_data(EntryType.Update, key_id, "{}") == expected

    def test_build_signed_entry(self, did_id, signing_key):
        entry_data = build_signed_entry(EntryType.Update, signing_key, did_id, '{"add":{}}')

        assert entry_data.ext_ids[:3] == [b"DIDUpdate", b"1.0.0", f"{did_id}#signing-key".encode()]
        assert entry_data.content == b'{"add":{}}'
        digest = signed_data(EntryType.Update, f"{did_id}#signing-key", '{"add":{}}')
        assert signing_key.verify(digest, entry_data.ext_ids[3])

    def test_verify_entry_signature(self, did_id, signing_key):
        entry_data = build_signed_entry(EntryType.VersionUpgrade, signing_key, did_id, '{"x":1}')
        assert verify_entry_signature(entry_data, signing_key)

    def test_tampered_content_fails(self, did_id, signing_key):
        entry_data = build_signed_entry(EntryType.Update, signing_key, did_id, '{"x":1}')
        entry_data.content = b'{"x":2}'
        assert verify_entry_signature(entry_data, signing_key) is False

    def test_other_key_fails(self, did_id, signing_key):
        entry_data = build_signed_entry(EntryType.Update, signing_key, did_id, '{"x":1}')
        other = ManagementKey("other-key", 0, KeyType.EdDSA, did_id)
        assert verify_entry_signature(entry_data, other) is False

    def test_malformed_entries_fail(self, did_id, signing_key):
        assert verify_entry_signature(EntryData(ext_ids=[b"DIDUpdate"], content=b""), signing_key) is False
        entry_data = build_signed_entry(EntryType.Update, signing_key, did_id, '{"x":1}')
        entry_data.ext_ids[3] = b"short"
        assert verify_entry_signature(entry_data, signing_key) is False

    def test_oversized_entry(self, did_id, signing_key):
        with pytest.raises(EntrySizeLimitError, match="exceeded the entry size limit"):
            build_signed_entry(EntryType.Update, signing_key, did_id, "x" * 10000)
