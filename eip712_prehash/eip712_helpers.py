"""
EIP712 struct encoding and hashing

encode_data produces typeHash || enc(field1) || enc(field2) ... exactly as
signTypedData_v4 does; hash_struct hashes that encoding. The hash function is
a parameter so callers can substitute a fixture, keccak256 is the default.
"""

import logging
import numbers
from collections.abc import Mapping
from typing import Any, Callable, Optional

from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_utils import is_0x_prefixed, keccak, remove_0x_prefix

from .eip712_config import EIP712_PREFIX, ZERO_WORD
from .errors import MissingFieldError, TypedDataValueError
from .schema import TypeSchema, parse_array_type

log = logging.getLogger(__name__)

HashFunction = Callable[[bytes], bytes]

_BOOL_STRINGS = {"true": True, "false": False}


def keccak256(data: bytes) -> bytes:
    """Compute keccak256 hash of data"""
    return keccak(data)


def encode_type(type_name: str, schema: TypeSchema) -> str:
    """Canonical type signature of a struct and the structs it references"""
    return schema.encode_type(type_name)


def hash_type(type_name: str, schema: TypeSchema, hash_fn: HashFunction = keccak256) -> bytes:
    """typeHash = hash(encodeType(type_name))"""
    return hash_fn(encode_type(type_name, schema).encode("utf-8"))


def encode_data(
    type_name: str,
    value: Any,
    schema: TypeSchema,
    hash_fn: HashFunction = keccak256,
    strict: bool = False,
) -> bytes:
    """
    Encode a struct value: typeHash followed by one 32 byte word per field,
    in declaration order.

    Fields declared by the schema but absent from the value are encoded as
    their type's zero value (0, "", empty bytes, zero word for structs, empty
    array). This leniency is intentional; pass strict=True to raise
    MissingFieldError instead.
    """
    fields = schema.fields_of(type_name)
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise TypedDataValueError(
            f"{type_name} value must be a mapping, got {type(value).__name__}", type_name=type_name
        )

    encoded = [hash_type(type_name, schema, hash_fn)]
    for field in fields:
        if field.name in value:
            field_value = value[field.name]
        elif strict:
            raise MissingFieldError(
                f"missing value for field {field.name} of type {field.type} in {type_name}",
                field=field.name,
                type_name=field.type,
            )
        else:
            field_value = None
        encoded.append(encode_field(schema, field.name, field.type, field_value, hash_fn, strict))
    return b"".join(encoded)


def hash_struct(
    type_name: str,
    value: Any,
    schema: TypeSchema,
    hash_fn: HashFunction = keccak256,
    strict: bool = False,
) -> bytes:
    """hashStruct(s) = hash(encodeData(s))"""
    return hash_fn(encode_data(type_name, value, schema, hash_fn, strict))


def encode_field(
    schema: TypeSchema,
    name: str,
    type_name: str,
    value: Any,
    hash_fn: HashFunction = keccak256,
    strict: bool = False,
) -> bytes:
    """Encode a single field value as one 32 byte word"""
    if schema.is_struct_type(type_name):
        if value is None:
            return ZERO_WORD
        return hash_struct(type_name, value, schema, hash_fn, strict)

    is_array, element_type = schema.is_array_type(type_name)
    if is_array:
        if value is None:
            value = []
        if not isinstance(value, (list, tuple)):
            raise TypedDataValueError(
                f"{name} must be a list for type {type_name}, got {type(value).__name__}",
                field=name,
                type_name=type_name,
            )
        _, _, length = parse_array_type(type_name)
        if length is not None and length != len(value):
            log.warning("%s declared as %s but holds %d items", name, type_name, len(value))
        words = [encode_field(schema, name, element_type, item, hash_fn, strict) for item in value]
        return hash_fn(b"".join(words))

    if type_name == "string":
        return hash_fn(_to_text_bytes(value, name, type_name))
    if type_name == "bytes":
        return hash_fn(_to_dynamic_bytes(value, name, type_name))
    if type_name.startswith("bytes"):
        size = int(type_name[len("bytes"):])
        return _abi_word(type_name, _to_bytes(value, name, type_name)[:size], name)
    if type_name == "bool":
        return _abi_word(type_name, _to_bool(value, name, type_name), name)
    if type_name == "address":
        number = _to_int(value, name, type_name)
        if not 0 <= number < 2 ** 160:
            raise TypedDataValueError(f"{name} is not a 20 byte address: {value!r}", name, type_name)
        return _abi_word(type_name, number.to_bytes(20, "big"), name)
    if type_name.startswith(("uint", "int")):
        return _abi_word(type_name, _to_int(value, name, type_name), name)

    raise TypedDataValueError(f"unsupported type {type_name} for field {name}", name, type_name)


def get_eip712_digest(
    domain_separator: bytes,
    struct_hash: Optional[bytes] = None,
    hash_fn: HashFunction = keccak256,
) -> bytes:
    """Compute the EIP712 digest: hash(0x1901 || domainSeparator || hashStruct(message))"""
    parts = [EIP712_PREFIX, domain_separator]
    if struct_hash is not None:
        parts.append(struct_hash)
    return hash_fn(b"".join(parts))


def _abi_word(type_name: str, value: Any, name: str) -> bytes:
    try:
        return encode([type_name], [value])
    except EncodingError as exc:
        raise TypedDataValueError(f"cannot encode {name} as {type_name}: {exc}", name, type_name) from exc


def _to_int(value: Any, name: str, type_name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        # 0x prefixed strings are hex, anything else (including sanitized integers) is decimal
        base = 16 if text.lstrip("-").lower().startswith("0x") else 10
        try:
            return int(text, base)
        except ValueError:
            pass
    raise TypedDataValueError(f"{name} is not a valid {type_name}: {value!r}", name, type_name)


def _to_bytes(value: Any, name: str, type_name: str) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return b""
        if text.lower().startswith("0x"):
            digits = remove_0x_prefix(text)
            if len(digits) % 2:
                digits = "0" + digits
            try:
                return bytes.fromhex(digits)
            except ValueError:
                pass
        elif text.isdecimal():
            value = int(text)
    if isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 0:
        number = int(value)
        return number.to_bytes(max(1, (number.bit_length() + 7) // 8), "big")
    raise TypedDataValueError(
        f"{name} must be bytes or a 0x prefixed hex string for {type_name}: {value!r}", name, type_name
    )


def _to_dynamic_bytes(value: Any, name: str, type_name: str) -> bytes:
    """
    Content of a dynamic bytes field as signTypedData_v4 reads it: valid 0x
    hex is decoded, any other string is taken as UTF-8 text. Sanitized
    integers are decimal strings by then, so they hash as text too.
    """
    if isinstance(value, str):
        if is_0x_prefixed(value):
            try:
                return _to_bytes(value, name, type_name)
            except TypedDataValueError:
                pass
        return value.encode("utf-8")
    return _to_bytes(value, name, type_name)


def _to_text_bytes(value: Any, name: str, type_name: str) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypedDataValueError(f"{name} must be a string: {value!r}", name, type_name)


def _to_bool(value: Any, name: str, type_name: str) -> bool:
    """Booleans, the strings "true"/"false", and the integers 0/1; None is false"""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value in _BOOL_STRINGS:
        return _BOOL_STRINGS[value]
    if isinstance(value, numbers.Integral) and value in (0, 1):
        return bool(value)
    raise TypedDataValueError(f"{name} is not a valid {type_name}: {value!r}", name, type_name)
