"""
DID Exceptions

Every failure raised by the DID library derives from DIDError. Input
validation errors also derive from ValueError so callers that only care
about bad input can catch that.
"""


class DIDError(Exception):
    """Base class for all DID library errors."""
    pass


class ValidationError(DIDError, ValueError):
    """Raised when an alias, controller, endpoint, priority or similar input is malformed."""
    pass


class DuplicateAliasError(ValidationError):
    """Raised when an alias is reused within the key or the service namespace."""

    def __init__(self, alias: str):
        super().__init__(f'Duplicate alias "{alias}" detected.')
        self.alias = alias


class InvariantError(DIDError):
    """Raised when an operation would leave the DID without a usable management key."""
    pass


class ProtocolError(DIDError):
    """Raised when an entry cannot be produced because a protocol precondition fails."""
    pass


class UnknownSchemaVersionError(ProtocolError):
    """Raised when an entry object is requested for an unsupported schema version."""

    def __init__(self, version: str):
        super().__init__(f"Unknown schema version: {version}")
        self.version = version


class EntrySizeLimitError(DIDError):
    """Raised when an exported entry would not fit into a single chain entry."""

    def __init__(self, message: str, size: int, limit: int):
        super().__init__(message)
        self.size = size
        self.limit = limit


class CryptoError(DIDError):
    """Base class for key and signature errors."""
    pass


class KeyFormatError(CryptoError, ValueError):
    """Raised when key material cannot be decoded for the selected algorithm."""
    pass


class KeyMismatchError(CryptoError):
    """Raised when a supplied public key is not the one derived from the private key."""

    def __init__(self):
        super().__init__(
            "The provided public key does not match the one derived from the provided private key."
        )


class MissingPrivateKeyError(CryptoError):
    """Raised when signing or rotation is attempted on a public-only key."""
    pass


class SignatureFormatError(CryptoError, ValueError):
    """Raised when a signature is structurally invalid for the key algorithm."""
    pass
