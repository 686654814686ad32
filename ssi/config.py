"""
DID Method Configuration

Protocol constants for the did:factom method plus the few settings that can
be overridden from the environment (or a local .env file).

Environment variables:
- DID_ENTRY_SIZE_LIMIT: maximum entry size in bytes (default 10000)
- DID_METHOD_SPEC_VERSION: method spec version for new DIDs (default 0.2.0)
"""

import os
from dotenv import load_dotenv

load_dotenv()

DID_METHOD_NAME = "did:factom"
ENTRY_SCHEMA_V100 = "1.0.0"
DID_METHOD_SPEC_V020 = "0.2.0"

# Factom entry header is a fixed 35 bytes, every ExtID adds a 2-byte length prefix
ENTRY_HEADER_SIZE = 35
EXT_ID_LENGTH_PREFIX_SIZE = 2

NONCE_SIZE = 32
RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


ENTRY_SIZE_LIMIT = _int_from_env("DID_ENTRY_SIZE_LIMIT", 10000)
DEFAULT_SPEC_VERSION = os.getenv("DID_METHOD_SPEC_VERSION", DID_METHOD_SPEC_V020)
