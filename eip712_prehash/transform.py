"""
Pre-compute the EIP712 hashes for signers that cannot encode typed data.

Some hardware wallets (Trezor Model One, for instance) only accept the domain
separator hash and the message hash. transform_typed_data computes both the
way signTypedData_v4 does and returns them alongside the original payload so
the device can still display the domain and message for confirmation.
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .eip712_config import (
    DEFAULT_VERSION,
    DOMAIN_SEPARATOR_HASH_KEY,
    DOMAIN_TYPE_NAME,
    MESSAGE_HASH_KEY,
    WORD_SIZE,
)
from .eip712_helpers import HashFunction, get_eip712_digest, hash_struct, keccak256
from .errors import HashPrimitiveError, UnsupportedVersionError
from .sanitize import sanitize_data
from .schema import TypeSchema

log = logging.getLogger(__name__)


class TypedDataVersion(Enum):
    """Typed data encoding variants, named after the eth_signTypedData versions."""

    V1 = "V1"
    V3 = "V3"
    V4 = "V4"


SUPPORTED_VERSIONS = frozenset({TypedDataVersion.V4})


def resolve_version(version: Union[TypedDataVersion, str]) -> TypedDataVersion:
    """Return the supported TypedDataVersion for version or raise UnsupportedVersionError."""
    if isinstance(version, TypedDataVersion):
        resolved = version
    elif isinstance(version, str):
        try:
            resolved = TypedDataVersion(version.strip().upper())
        except ValueError:
            raise UnsupportedVersionError(f"unknown typed data version {version!r}") from None
    else:
        raise UnsupportedVersionError(f"typed data version must be a TypedDataVersion, got {version!r}")

    if resolved not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(
            f"only version 4 of typed data signing is supported, got {resolved.value}"
        )
    return resolved


def _guarded(hash_fn: HashFunction, struct_name: str) -> HashFunction:
    """Wrap hash_fn so its failures name the struct being hashed."""

    def guarded(data: bytes) -> bytes:
        try:
            digest = hash_fn(data)
        except Exception as exc:
            raise HashPrimitiveError(struct_name, f"hash function failed: {exc}") from exc
        if not isinstance(digest, (bytes, bytearray)) or len(digest) != WORD_SIZE:
            raise HashPrimitiveError(
                struct_name, f"hash function returned {digest!r}, expected {WORD_SIZE} bytes"
            )
        return bytes(digest)

    return guarded


def _hash_domain_and_message(
    data: Mapping,
    version: Union[TypedDataVersion, str],
    hash_fn: HashFunction,
    strict: bool,
) -> Tuple[bytes, Optional[bytes]]:
    resolve_version(version)
    schema = TypeSchema.from_payload(data)

    domain = sanitize_data(data.get("domain"))
    message = sanitize_data(data.get("message"))

    domain_hash = hash_struct(DOMAIN_TYPE_NAME, domain, schema, _guarded(hash_fn, "domain"), strict)
    log.debug("Domain separator hash: %s", domain_hash.hex())

    if schema.primary_type == DOMAIN_TYPE_NAME:
        return domain_hash, None

    message_hash = hash_struct(schema.primary_type, message, schema, _guarded(hash_fn, "message"), strict)
    log.debug("%s message hash: %s", schema.primary_type, message_hash.hex())
    return domain_hash, message_hash


def transform_typed_data(
    data: Mapping,
    version: Union[TypedDataVersion, str] = DEFAULT_VERSION,
    *,
    hash_fn: HashFunction = keccak256,
    strict: bool = False,
) -> Dict[str, Any]:
    """
    Calculate the domain separator hash and message hash of EIP712 typed data.

    Args:
        data: typed data with types, primaryType, domain and message
        version: encoding variant; only TypedDataVersion.V4 is supported
        hash_fn: 32 byte hash primitive, keccak256 unless substituted
        strict: raise MissingFieldError instead of zero-filling absent fields

    Returns:
        A new dict holding every field of data plus ``domain_separator_hash``
        and, unless primaryType is EIP712Domain, ``message_hash``. Both are
        lowercase hex without a 0x prefix.

    Raises:
        UnsupportedVersionError: before anything is hashed
        SchemaError: types is incomplete or malformed
        TypedDataValueError: a value does not fit its declared type
        HashPrimitiveError: hash_fn failed while hashing the domain or message
    """
    domain_hash, message_hash = _hash_domain_and_message(data, version, hash_fn, strict)

    result = dict(data)
    result[DOMAIN_SEPARATOR_HASH_KEY] = domain_hash.hex()
    if message_hash is None:
        result.pop(MESSAGE_HASH_KEY, None)
    else:
        result[MESSAGE_HASH_KEY] = message_hash.hex()
    return result


def typed_data_digest(
    data: Mapping,
    version: Union[TypedDataVersion, str] = DEFAULT_VERSION,
    *,
    hash_fn: HashFunction = keccak256,
    strict: bool = False,
) -> bytes:
    """The 32 byte digest a full featured signer would sign for data."""
    domain_hash, message_hash = _hash_domain_and_message(data, version, hash_fn, strict)
    return get_eip712_digest(domain_hash, message_hash, _guarded(hash_fn, "digest"))
