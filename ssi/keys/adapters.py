"""
Key Algorithm Dispatch

The three algorithm adapters share one capability (sign, verify, encoded
public/private key, on-chain field name) but no base class. Entities pick the
adapter by matching the KeyType tag in ADAPTERS.
"""

from typing import Dict, Optional, Protocol, Type, Union

from ssi.enums import KeyType
from ssi.keys.ecdsa import ECDSASecp256k1Key
from ssi.keys.eddsa import Ed25519Key
from ssi.keys.rsa import RSAKey


class SigningKeyAdapter(Protocol):
    on_chain_pub_key_name: str

    @property
    def public_key(self) -> str: ...

    @property
    def private_key(self) -> Optional[str]: ...

    def sign(self, message: Union[str, bytes]) -> bytes: ...

    def verify(self, message: Union[str, bytes], signature: bytes) -> bool: ...


ADAPTERS: Dict[KeyType, Type] = {
    KeyType.EdDSA: Ed25519Key,
    KeyType.ECDSA: ECDSASecp256k1Key,
    KeyType.RSA: RSAKey,
}


def create_adapter(
    key_type: KeyType,
    public_key: Union[str, bytes, None] = None,
    private_key: Union[str, bytes, None] = None,
) -> SigningKeyAdapter:
    """
    Build the adapter for a key type.

    Args:
        key_type: KeyType member (or its value/name)
        public_key: Optional encoded public key
        private_key: Optional encoded private key

    Returns:
        A freshly generated key pair when neither key is supplied, otherwise
        the decoded key
    """
    return ADAPTERS[KeyType.parse(key_type)](public_key, private_key)
