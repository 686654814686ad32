"""
DID Enumerations

Tags used on-chain: key types, DID key purposes, entry types and networks.
Every enum accepts its on-chain value or its member name through `parse`, so
callers can write either KeyType.ECDSA, "ECDSA" or
"ECDSASecp256k1VerificationKey".
"""

from enum import Enum


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value or value == member.name:
                    return member
        raise ValueError(f"{value!r} is not a valid {cls.__name__}")


class Network(_ParsableEnum):
    Mainnet = "mainnet"
    Testnet = "testnet"
    Unspecified = ""


class KeyType(_ParsableEnum):
    EdDSA = "Ed25519VerificationKey"
    ECDSA = "ECDSASecp256k1VerificationKey"
    RSA = "RSAVerificationKey"


class DIDKeyPurpose(_ParsableEnum):
    PublicKey = "publicKey"
    AuthenticationKey = "authenticationKey"

    @property
    def complement(self) -> "DIDKeyPurpose":
        if self is DIDKeyPurpose.PublicKey:
            return DIDKeyPurpose.AuthenticationKey
        return DIDKeyPurpose.PublicKey


class EntryType(_ParsableEnum):
    Create = "DIDManagement"
    Update = "DIDUpdate"
    Deactivation = "DIDDeactivation"
    VersionUpgrade = "DIDMethodVersionUpgrade"
