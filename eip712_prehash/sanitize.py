"""
Value sanitization before struct encoding.

Hardware signers cannot represent arbitrary precision integers, so every
integer in the domain and message is rewritten as its decimal string. The
encoder parses decimal strings back losslessly.
"""

import numbers
from collections.abc import Mapping
from enum import Enum
from typing import Any


class ValueKind(Enum):
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    BIG_INTEGER = "big_integer"
    SCALAR = "scalar"
    OPAQUE = "opaque"


_SCALAR_TYPES = (str, bytes, bytearray, bool, float, type(None))


def classify_value(value: Any) -> ValueKind:
    """Classify a value by runtime shape."""
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    # bool is an Integral subclass
    if isinstance(value, _SCALAR_TYPES):
        return ValueKind.SCALAR
    if isinstance(value, numbers.Integral):
        return ValueKind.BIG_INTEGER
    return ValueKind.OPAQUE


def sanitize_data(value: Any) -> Any:
    """
    Rewrite a value graph into primitives the struct encoder understands.

    Rules:
    - mappings become new dicts, keys and insertion order preserved
    - lists and tuples become new lists, order preserved
    - integers (not bools) become decimal strings
    - everything else is returned unchanged

    Never raises; the input is not modified.
    """
    kind = classify_value(value)
    if kind is ValueKind.MAPPING:
        return {k: sanitize_data(v) for k, v in value.items()}
    if kind is ValueKind.SEQUENCE:
        return [sanitize_data(x) for x in value]
    if kind is ValueKind.BIG_INTEGER:
        return str(int(value))
    return value
