"""DID keys and the signature algorithms behind them."""

from ssi.keys.abstract import AbstractDIDKey
from ssi.keys.adapters import ADAPTERS, SigningKeyAdapter, create_adapter
from ssi.keys.did_key import ApplicationKey, DIDKey
from ssi.keys.ecdsa import ECDSASecp256k1Key
from ssi.keys.eddsa import Ed25519Key
from ssi.keys.management import ManagementKey
from ssi.keys.rsa import RSAKey
