"""
Shared fixtures for the DID test suite.

The fixture DID mixes all three key algorithms and a second controller so
update tests exercise every on-chain encoding.
"""

import pytest

from ssi.config import DID_METHOD_NAME
from ssi.enums import DIDKeyPurpose, KeyType, Network
from ssi.keys.did_key import DIDKey
from ssi.keys.management import ManagementKey
from ssi.service import Service

DID_ID = f"{DID_METHOD_NAME}:{Network.Mainnet.value}:db4549470d24534fac28569d0f9c65b5ecef8d6332bc788b4d1b8dc1c2dae13a"
CONTROLLER = f"{DID_METHOD_NAME}:{Network.Mainnet.value}:d3936b2f0bdd45fe71d7156e835434b7970afd78868076f56654d05f838b8005"


@pytest.fixture
def did_id():
    return DID_ID


@pytest.fixture
def controller():
    return CONTROLLER


@pytest.fixture
def management_keys():
    return [
        ManagementKey("my-first-mgmt-key", 0, KeyType.EdDSA, DID_ID),
        ManagementKey("my-second-mgmt-key", 1, KeyType.ECDSA, DID_ID, 0),
        ManagementKey("my-third-mgmt-key", 2, KeyType.RSA, CONTROLLER, 1),
    ]


@pytest.fixture
def did_keys():
    return [
        DIDKey("did-key-1", DIDKeyPurpose.AuthenticationKey, KeyType.EdDSA, DID_ID),
        DIDKey(
            "did-key-2",
            [DIDKeyPurpose.PublicKey, DIDKeyPurpose.AuthenticationKey],
            KeyType.ECDSA,
            DID_ID,
            1,
        ),
        DIDKey("did-key-3", [DIDKeyPurpose.PublicKey], KeyType.RSA, CONTROLLER, 0),
    ]


@pytest.fixture
def services():
    return [
        Service("gmail-service", "EmailService", "https://gmail.com", 2),
        Service("banking-credential-service", "CredentialStoreService", "https://credentials.com"),
    ]
