"""
Resolved EIP712 type schema.

Built once per payload from its ``types`` mapping. Only the struct types
reachable from the primary type and EIP712Domain are resolved, and every field
type they reference must be elementary or declared.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .eip712_config import DOMAIN_TYPE_NAME
from .errors import SchemaError

log = logging.getLogger(__name__)

_ARRAY_RE = re.compile(r"^(.+)\[(\d*)\]$")
_INT_RE = re.compile(r"^u?int([1-9][0-9]*)$")
_FIXED_BYTES_RE = re.compile(r"^bytes([1-9][0-9]*)$")


@dataclass(frozen=True)
class FieldDef:
    name: str
    type: str


def is_elementary_type(type_name: str) -> bool:
    """True for string, bytes, bool, address, (u)int8..256 and bytes1..32"""
    if type_name in ("string", "bytes", "bool", "address"):
        return True
    match = _INT_RE.match(type_name)
    if match:
        bits = int(match.group(1))
        return bits <= 256 and bits % 8 == 0
    match = _FIXED_BYTES_RE.match(type_name)
    if match:
        return int(match.group(1)) <= 32
    return False


def parse_array_type(type_name: str) -> Tuple[bool, Optional[str], Optional[int]]:
    """
    Split the outermost array marker off a type name.

    "Person[][2]" -> (True, "Person[]", 2), "uint256[]" -> (True, "uint256", None),
    "Person" -> (False, None, None)
    """
    match = _ARRAY_RE.match(type_name)
    if not match:
        return False, None, None
    length = int(match.group(2)) if match.group(2) else None
    return True, match.group(1), length


def base_type(type_name: str) -> str:
    """Strip every array marker from a type name"""
    is_array, element, _ = parse_array_type(type_name)
    while is_array:
        type_name = element
        is_array, element, _ = parse_array_type(type_name)
    return type_name


class TypeSchema:
    """Mapping from struct name to its ordered field definitions."""

    def __init__(self, types: Mapping, primary_type: str):
        if not isinstance(types, Mapping):
            raise SchemaError("types must be a mapping of type name to field list")
        if not isinstance(primary_type, str) or not primary_type:
            raise SchemaError(f"primaryType must be a type name, got {primary_type!r}")
        for required in (DOMAIN_TYPE_NAME, primary_type):
            if required not in types:
                raise SchemaError(f"types has no definition for {required!r}")

        self.primary_type = primary_type
        self._types: Dict[str, List[FieldDef]] = {}
        self._resolve(types, DOMAIN_TYPE_NAME)
        self._resolve(types, primary_type)
        log.debug("Resolved %d struct types for %s", len(self._types), primary_type)

    @classmethod
    def from_payload(cls, payload: Mapping) -> "TypeSchema":
        if not isinstance(payload, Mapping):
            raise SchemaError(f"typed data must be a mapping, got {type(payload).__name__}")
        for key in ("types", "primaryType"):
            if key not in payload:
                raise SchemaError(f"typed data has no {key!r}")
        return cls(payload["types"], payload["primaryType"])

    def _resolve(self, types: Mapping, root: str) -> None:
        pending = [root]
        while pending:
            name = pending.pop()
            if name in self._types:
                continue
            fields = _parse_fields(name, types[name])
            self._types[name] = fields
            for field in fields:
                referenced = base_type(field.type)
                if referenced in types:
                    pending.append(referenced)
                elif not is_elementary_type(referenced):
                    raise SchemaError(
                        f"{name}.{field.name} has type {field.type!r} which is neither "
                        f"elementary nor declared in types"
                    )

    def fields_of(self, type_name: str) -> List[FieldDef]:
        try:
            return list(self._types[type_name])
        except KeyError:
            raise SchemaError(f"{type_name!r} is not a struct type of this payload") from None

    def is_struct_type(self, type_name: str) -> bool:
        return type_name in self._types

    def is_array_type(self, type_name: str) -> Tuple[bool, Optional[str]]:
        is_array, element, _ = parse_array_type(type_name)
        return is_array, element

    def dependencies(self, type_name: str) -> List[str]:
        """Struct types reachable from type_name, depth first, type_name first"""
        found: List[str] = []

        def visit(name: str) -> None:
            if name in found or not self.is_struct_type(name):
                return
            found.append(name)
            for field in self._types[name]:
                visit(base_type(field.type))

        visit(base_type(type_name))
        return found

    def encode_type(self, type_name: str) -> str:
        """
        Canonical type signature, e.g.
        "Mail(Person from,Person to,string contents)Person(string name,address wallet)".

        The type itself comes first; referenced struct definitions follow
        sorted by name.
        """
        self.fields_of(type_name)
        primary, *referenced = self.dependencies(type_name)
        return "".join(self._render(name) for name in [primary] + sorted(referenced))

    def _render(self, type_name: str) -> str:
        members = ",".join(f"{field.type} {field.name}" for field in self._types[type_name])
        return f"{type_name}({members})"


def _parse_fields(type_name: str, raw_fields: Any) -> List[FieldDef]:
    if not isinstance(raw_fields, (list, tuple)):
        raise SchemaError(f"definition of {type_name!r} must be a list of fields")
    fields = []
    for raw in raw_fields:
        if not isinstance(raw, Mapping):
            raise SchemaError(f"field of {type_name!r} must be a mapping, got {raw!r}")
        name, field_type = raw.get("name"), raw.get("type")
        if not isinstance(name, str) or not isinstance(field_type, str):
            raise SchemaError(f"field of {type_name!r} needs string 'name' and 'type': {raw!r}")
        fields.append(FieldDef(name, field_type))
    return fields
