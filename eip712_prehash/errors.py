"""
Exception types raised while preparing typed data for a signing device.

Every error means the payload must not be signed. None of them are transient.
"""


class TypedDataError(Exception):
    """Base class for all typed data preparation failures."""
    pass


class UnsupportedVersionError(TypedDataError):
    """Raised when an encoding variant other than signTypedData_v4 is requested."""
    pass


class SchemaError(TypedDataError):
    """Raised when the types mapping is malformed or misses a referenced type."""
    pass


class TypedDataValueError(TypedDataError):
    """Raised when a value cannot be encoded as its declared type."""

    def __init__(self, message: str, field: str = None, type_name: str = None):
        super().__init__(message)
        self.field = field
        self.type_name = type_name


class MissingFieldError(TypedDataValueError):
    """Raised in strict mode when a declared field is absent from the value."""
    pass


class HashPrimitiveError(TypedDataError):
    """Raised when the hash function fails while hashing the domain or the message."""

    def __init__(self, struct_name: str, message: str):
        super().__init__(f"{struct_name}: {message}")
        self.struct_name = struct_name
