"""
EIP712 typed data pre-hashing for constrained signing devices.

Sanitizes typed data, resolves its type schema and computes the domain
separator hash and message hash a hardware signer expects.
"""

from .eip712_helpers import encode_data, encode_type, get_eip712_digest, hash_struct, hash_type, keccak256
from .errors import (
    HashPrimitiveError,
    MissingFieldError,
    SchemaError,
    TypedDataError,
    TypedDataValueError,
    UnsupportedVersionError,
)
from .sanitize import ValueKind, classify_value, sanitize_data
from .schema import FieldDef, TypeSchema
from .transform import TypedDataVersion, transform_typed_data, typed_data_digest

__version__ = "0.1.0"

__all__ = [
    "FieldDef",
    "HashPrimitiveError",
    "MissingFieldError",
    "SchemaError",
    "TypeSchema",
    "TypedDataError",
    "TypedDataValueError",
    "TypedDataVersion",
    "UnsupportedVersionError",
    "ValueKind",
    "classify_value",
    "encode_data",
    "encode_type",
    "get_eip712_digest",
    "hash_struct",
    "hash_type",
    "keccak256",
    "sanitize_data",
    "transform_typed_data",
    "typed_data_digest",
]
