"""
DID Key Tests
"""

import pytest

from ssi.enums import DIDKeyPurpose, KeyType
from ssi.errors import ValidationError
from ssi.keys.did_key import ApplicationKey, DIDKey, parse_purposes

PURPOSE_SET_ERROR = "Purpose must contain one or both of publicKey and authenticationKey"


class TestPurposeParsing:
    """Test purpose normalisation"""

    def test_single_purpose(self):
        assert parse_purposes(DIDKeyPurpose.PublicKey) == [DIDKeyPurpose.PublicKey]
        assert parse_purposes("authenticationKey") == [DIDKeyPurpose.AuthenticationKey]

    def test_both_purposes_keep_order(self):
        purposes = parse_purposes(["authenticationKey", DIDKeyPurpose.PublicKey])
        assert purposes == [DIDKeyPurpose.AuthenticationKey, DIDKeyPurpose.PublicKey]

    def test_invalid_purpose_type(self):
        with pytest.raises(ValidationError, match="Invalid purpose type"):
            parse_purposes(1)

    def test_repeated_purpose(self):
        with pytest.raises(ValidationError, match=PURPOSE_SET_ERROR):
            parse_purposes([DIDKeyPurpose.AuthenticationKey, DIDKeyPurpose.AuthenticationKey])

    def test_empty_purpose(self):
        with pytest.raises(ValidationError, match=PURPOSE_SET_ERROR):
            parse_purposes([])

    def test_unknown_purpose(self):
        for purpose in ["invalid-purpose-type", [DIDKeyPurpose.AuthenticationKey, "invalid-purpose-type"]]:
            with pytest.raises(ValidationError, match="Purpose must contain only valid DIDKeyPurpose values"):
                parse_purposes(purpose)


class TestDIDKey:
    """Test DID key construction and on-chain objects"""

    def test_entry_object(self, did_id):
        key = DIDKey("did-key", [DIDKeyPurpose.PublicKey, DIDKeyPurpose.AuthenticationKey], KeyType.ECDSA, did_id, 2)
        assert key.to_entry_obj(did_id) == {
            "id": f"{did_id}#did-key",
            "type": "ECDSASecp256k1VerificationKey",
            "controller": did_id,
            "publicKeyBase58": key.public_key,
            "priorityRequirement": 2,
            "purpose": ["publicKey", "authenticationKey"],
        }

    def test_with_purpose_shares_key_material(self, did_id):
        key = DIDKey("did-key", ["publicKey", "authenticationKey"], KeyType.EdDSA, did_id)
        narrowed = key.with_purpose(DIDKeyPurpose.AuthenticationKey)

        assert narrowed.purpose == [DIDKeyPurpose.AuthenticationKey]
        assert narrowed.public_key == key.public_key
        assert narrowed.private_key == key.private_key
        assert key.purpose == [DIDKeyPurpose.PublicKey, DIDKeyPurpose.AuthenticationKey]

    def test_purpose_is_part_of_equality(self, did_id):
        key = DIDKey("did-key", ["publicKey", "authenticationKey"], KeyType.EdDSA, did_id)
        assert key.with_purpose(["publicKey", "authenticationKey"]) == key
        assert key.with_purpose("publicKey") != key

    def test_rotation(self, did_id):
        key = DIDKey("did-key", "publicKey", KeyType.RSA, did_id)
        rotated = key.rotated()
        assert rotated.public_key != key.public_key
        assert rotated.purpose == key.purpose

    def test_application_key_alias(self):
        assert ApplicationKey is DIDKey

    def test_invalid_alias(self, did_id):
        for alias in ["myDidKey", "my-d!d-key", "my_did_key"]:
            with pytest.raises(ValidationError):
                DIDKey(alias, "publicKey", KeyType.EdDSA, did_id)
