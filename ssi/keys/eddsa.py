"""
Ed25519 Key Adapter

Ed25519 key pairs backed by PyNaCl. The public key is the raw 32-byte
verifying key; the private key is the 64-byte expanded secret key
(seed || public key), the layout used by NaCl/tweetnacl. Both are base58
encoded on-chain.

Messages are hashed with SHA-256 before signing, and the digest (not the raw
message) is what Ed25519 signs.
"""

import hashlib
from typing import Optional, Union

import base58
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from ssi.errors import KeyFormatError, KeyMismatchError, MissingPrivateKeyError, SignatureFormatError

PUBLIC_KEY_SIZE = 32
SEED_SIZE = 32
SECRET_KEY_SIZE = 64
SIGNATURE_SIZE = 64

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
            raise KeyFormatError(f"Invalid Ed25519 {label} key: not valid base58 ({e}).")
    raise KeyFormatError(f"{label.capitalize()} key must be a string or bytes.")


class Ed25519Key:
    """
    Ed25519 signing key.

    Args:
        public_key: Optional base58 string or raw 32-byte public key
        private_key: Optional base58 string or raw 64-byte expanded secret key

    With no arguments a fresh key pair is generated. With both arguments the
    public key must match the one derived from the private key.

    Example:
        >>> key = Ed25519Key()
        >>> signature = key.sign("hello")
        >>> Ed25519Key(public_key=key.public_key).verify("hello", signature)
        True
    """

    on_chain_pub_key_name = "publicKeyBase58"

    def __init__(self, public_key: KeyInput = None, private_key: KeyInput = None):
        self.signing_key: Optional[SigningKey] = None

        # nothing supplied: generate a fresh pair
        if not public_key and not private_key:
            self.signing_key = SigningKey.generate()
            self.verifying_key: VerifyKey = self.signing_key.verify_key
            return

        public_bytes = _decode(public_key, "public") if public_key else None

        if private_key:
            secret = _decode(private_key, "private")
            # 64 bytes: 32-byte seed followed by the public key
            if len(secret) != SECRET_KEY_SIZE:
                raise KeyFormatError("Invalid Ed25519 private key. Must be a 64-byte value.")

            signing_key = SigningKey(secret[:SEED_SIZE])
            derived = signing_key.verify_key.encode()
            if derived != secret[SEED_SIZE:]:
                raise KeyFormatError(
                    "Invalid Ed25519 private key. The embedded public key does not match the seed."
                )
            # an explicit public key must be the one derived from the seed
            if public_bytes is not None and public_bytes != derived:
                raise KeyMismatchError()

            self.signing_key = signing_key
            self.verifying_key = signing_key.verify_key
        else:
            if len(public_bytes) != PUBLIC_KEY_SIZE:
                raise KeyFormatError("Invalid Ed25519 public key. Must be a 32-byte value.")
            self.verifying_key = VerifyKey(public_bytes)

    @property
    def public_key(self) -> str:
        return base58.b58encode(self.verifying_key.encode()).decode("ascii")

    @property
    def private_key(self) -> Optional[str]:
        if self.signing_key is None:
            return None
        secret = self.signing_key.encode() + self.verifying_key.encode()
        return base58.b58encode(secret).decode("ascii")

    def sign(self, message: Union[str, bytes]) -> bytes:
        """
        Sign the SHA-256 digest of a message.

        Args:
            message: Text (UTF-8 encoded before hashing) or bytes

        Returns:
            64-byte detached signature

        Raises:
            MissingPrivateKeyError: If the key has no private part
        """
        if self.signing_key is None:
            raise MissingPrivateKeyError("Private key is not set.")
        return self.signing_key.sign(_to_digest(message)).signature

    def verify(self, message: Union[str, bytes], signature: bytes) -> bool:
        """
        Verify a signature produced by `sign`.

        Returns:
            True if the signature is valid for this key, False otherwise

        Raises:
            SignatureFormatError: If the signature is not 64 bytes long
        """
        digest = _to_digest(message)
        if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_SIZE:
            raise SignatureFormatError("Invalid Ed25519 signature. Must be a 64-byte value.")
        try:
            self.verifying_key.verify(digest, bytes(signature))
        except BadSignatureError:
            return False
        return True
