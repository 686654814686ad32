"""
ECDSA secp256k1 Key Adapter

secp256k1 key pairs backed by the `cryptography` package. On-chain the public
key is the 33-byte compressed point and the private key the 32-byte scalar,
both base58 encoded. Signatures are DER encoded and computed over the SHA-256
digest of the message.
"""

import hashlib
from typing import Optional, Union

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, decode_dss_signature

from ssi.errors import KeyFormatError, KeyMismatchError, MissingPrivateKeyError, SignatureFormatError

PRIVATE_KEY_SIZE = 32

KeyInput = Union[str, bytes, None]


def _to_digest(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        message = message.encode("utf-8")
    elif not isinstance(message, (bytes, bytearray)):
        raise TypeError("Message must be a string or bytes.")
    return hashlib.sha256(message).digest()


def _decode(value: Union[str, bytes], label: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base58.b58decode(value)
        except ValueError as e:
            raise KeyFormatError(f"Invalid ECDSASecp256k1Key {label} key: not valid base58 ({e}).")
    raise KeyFormatError(f"{label.capitalize()} key must be a string or bytes.")


def _compressed(public_key: ec.EllipticCurvePublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.CompressedPoint,
    )


class ECDSASecp256k1Key:
    """
    ECDSA key on the secp256k1 curve.

    Args:
        public_key: Optional base58 string or raw SEC1 encoded point
        private_key: Optional base58 string or raw 32-byte scalar

    Example:
        >>> key = ECDSASecp256k1Key()
        >>> len(key.verifying_key)
        33
    """

    on_chain_pub_key_name = "publicKeyBase58"

    def __init__(self, public_key: KeyInput = None, private_key: KeyInput = None):
        self._private: Optional[ec.EllipticCurvePrivateKey] = None

        if not public_key and not private_key:
            self._private = ec.generate_private_key(ec.SECP256K1())
            self._public = self._private.public_key()
            return

        supplied_public = self._load_public(_decode(public_key, "public")) if public_key else None

        if private_key:
            scalar = _decode(private_key, "private")
            if len(scalar) != PRIVATE_KEY_SIZE:
                raise KeyFormatError("Invalid ECDSASecp256k1Key private key. Must be a 32-byte value.")
            try:
                self._private = ec.derive_private_key(int.from_bytes(scalar, "big"), ec.SECP256K1())
            except ValueError:
                raise KeyFormatError("Invalid ECDSASecp256k1Key private key.")
            self._public = self._private.public_key()

            if supplied_public is not None and _compressed(supplied_public) != _compressed(self._public):
                raise KeyMismatchError()
        else:
            self._public = supplied_public

    @staticmethod
    def _load_public(data: bytes) -> ec.EllipticCurvePublicKey:
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), data)
        except ValueError:
            raise KeyFormatError("Invalid ECDSASecp256k1Key public key.")

    @property
    def verifying_key(self) -> bytes:
        return _compressed(self._public)

    @property
    def signing_key(self) -> Optional[bytes]:
        if self._private is None:
            return None
        return self._private.private_numbers().private_value.to_bytes(PRIVATE_KEY_SIZE, "big")

    @property
    def public_key(self) -> str:
        return base58.b58encode(self.verifying_key).decode("ascii")

    @property
    def private_key(self) -> Optional[str]:
        signing_key = self.signing_key
        if signing_key is None:
            return None
        return base58.b58encode(signing_key).decode("ascii")

    def sign(self, message: Union[str, bytes]) -> bytes:
        """Sign the SHA-256 digest of a message and return a DER encoded signature."""
        if self._private is None:
            raise MissingPrivateKeyError("Private key is not set.")
        return self._private.sign(_to_digest(message), ec.ECDSA(Prehashed(hashes.SHA256())))

    def verify(self, message: Union[str, bytes], signature: bytes) -> bool:
        """
        Verify a DER encoded signature over the SHA-256 digest of a message.

        Raises:
            SignatureFormatError: If the signature is not a DER encoded (r, s) pair
        """
        digest = _to_digest(message)
        try:
            decode_dss_signature(bytes(signature))
        except (TypeError, ValueError):
            raise SignatureFormatError("Invalid ECDSASecp256k1Key signature. Must be DER encoded.")
        try:
            self._public.verify(bytes(signature), digest, ec.ECDSA(Prehashed(hashes.SHA256())))
        except InvalidSignature:
            return False
        return True
