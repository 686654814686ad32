"""
RSA Key Adapter

2048-bit RSA key pairs backed by the `cryptography` package. Keys travel as
PEM text: SubjectPublicKeyInfo for the public key and PKCS#8 for the private
key. Signatures use PKCS#1 v1.5 with SHA-256.
"""

from typing import Optional, Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ssi.config import RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT
from ssi.errors import KeyFormatError, KeyMismatchError, MissingPrivateKeyError, SignatureFormatError

KeyInput = Union[str, bytes, None]


def _to_bytes(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, (bytes, bytearray)):
        return bytes(message)
    raise TypeError("Message must be a string or bytes.")


def _pem_bytes(value: Union[str, bytes], label: str) -> bytes:
    if isinstance(value, str):
        return value.encode("ascii", errors="replace")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise KeyFormatError(f"{label.capitalize()} key must be PEM encoded.")


class RSAKey:
    """
    RSA signing key.

    Args:
        public_key: Optional PEM encoded SubjectPublicKeyInfo
        private_key: Optional PEM encoded PKCS#8 private key

    Generating a key (no arguments) takes noticeably longer than for the
    elliptic curve algorithms.
    """

    on_chain_pub_key_name = "publicKeyPem"

    def __init__(self, public_key: KeyInput = None, private_key: KeyInput = None):
        self.signing_key: Optional[rsa.RSAPrivateKey] = None

        if not public_key and not private_key:
            self.signing_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=RSA_KEY_SIZE,
            )
            self.verifying_key: rsa.RSAPublicKey = self.signing_key.public_key()
            return

        supplied_public = self._load_public(public_key) if public_key else None

        if private_key:
            self.signing_key = self._load_private(private_key)
            self.verifying_key = self.signing_key.public_key()
            if (
                supplied_public is not None
                and supplied_public.public_numbers() != self.verifying_key.public_numbers()
            ):
                raise KeyMismatchError()
        else:
            self.verifying_key = supplied_public

    @staticmethod
    def _load_public(value: Union[str, bytes]) -> rsa.RSAPublicKey:
        try:
            key = serialization.load_pem_public_key(_pem_bytes(value, "public"))
        except (ValueError, UnsupportedAlgorithm) as e:
            raise KeyFormatError(f"Invalid RSA public key: {e}")
        if not isinstance(key, rsa.RSAPublicKey):
            raise KeyFormatError("Invalid RSA public key: PEM does not contain an RSA key.")
        return key

    @staticmethod
    def _load_private(value: Union[str, bytes]) -> rsa.RSAPrivateKey:
        try:
            key = serialization.load_pem_private_key(_pem_bytes(value, "private"), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyFormatError(f"Invalid RSA private key: {e}")
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyFormatError("Invalid RSA private key: PEM does not contain an RSA key.")
        return key

    @property
    def public_key(self) -> str:
        return self.verifying_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")

    @property
    def private_key(self) -> Optional[str]:
        if self.signing_key is None:
            return None
        return self.signing_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("ascii")

    def sign(self, message: Union[str, bytes]) -> bytes:
        """Sign a message with PKCS#1 v1.5 over SHA-256."""
        if self.signing_key is None:
            raise MissingPrivateKeyError("Private key is not set.")
        return self.signing_key.sign(_to_bytes(message), padding.PKCS1v15(), hashes.SHA256())

    def verify(self, message: Union[str, bytes], signature: bytes) -> bool:
        """
        Verify a PKCS#1 v1.5 signature.

        Raises:
            SignatureFormatError: If the signature length differs from the modulus length
        """
        data = _to_bytes(message)
        if not isinstance(signature, (bytes, bytearray)) or len(signature) != self.verifying_key.key_size // 8:
            raise SignatureFormatError(
                f"Invalid RSA signature. Must be a {self.verifying_key.key_size // 8}-byte value."
            )
        try:
            self.verifying_key.verify(bytes(signature), data, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True
