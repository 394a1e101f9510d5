"""
Tests for type schema resolution.
"""

import pytest

from eip712_prehash.errors import SchemaError
from eip712_prehash.schema import FieldDef, TypeSchema, base_type, is_elementary_type, parse_array_type

DOMAIN = [{"name": "name", "type": "string"}]


def test_fields_of_keeps_declaration_order(mail_schema):
    assert mail_schema.fields_of("Mail") == [
        FieldDef("from", "Person"),
        FieldDef("to", "Person"),
        FieldDef("contents", "string"),
    ]


def test_fields_of_unknown_type(mail_schema):
    with pytest.raises(SchemaError):
        mail_schema.fields_of("Letter")


def test_struct_and_array_detection(mail_schema):
    assert mail_schema.is_struct_type("Person")
    assert not mail_schema.is_struct_type("string")
    assert mail_schema.is_array_type("Person[]") == (True, "Person")
    assert mail_schema.is_array_type("Person[][2]") == (True, "Person[]")
    assert mail_schema.is_array_type("uint256") == (False, None)


def test_parse_array_type():
    assert parse_array_type("uint8[3]") == (True, "uint8", 3)
    assert parse_array_type("bytes[]") == (True, "bytes", None)
    assert parse_array_type("bytes") == (False, None, None)
    assert base_type("Person[2][]") == "Person"


@pytest.mark.parametrize("type_name", [
    "string", "bytes", "bool", "address", "uint8", "uint256", "int128", "bytes1", "bytes32",
])
def test_elementary_types(type_name):
    assert is_elementary_type(type_name)


@pytest.mark.parametrize("type_name", ["uint", "uint7", "uint264", "int0", "bytes0", "bytes33", "Person", "uint08"])
def test_non_elementary_types(type_name):
    assert not is_elementary_type(type_name)


def test_missing_domain_type():
    with pytest.raises(SchemaError, match="EIP712Domain"):
        TypeSchema({"Mail": []}, "Mail")


def test_missing_primary_type():
    with pytest.raises(SchemaError, match="Mail"):
        TypeSchema({"EIP712Domain": DOMAIN}, "Mail")


def test_undeclared_reference():
    types = {
        "EIP712Domain": DOMAIN,
        "Mail": [{"name": "from", "type": "Persn[]"}],
    }
    with pytest.raises(SchemaError, match="Persn"):
        TypeSchema(types, "Mail")


def test_undeclared_reference_in_domain():
    types = {"EIP712Domain": [{"name": "owner", "type": "Owner"}], "Mail": []}
    with pytest.raises(SchemaError):
        TypeSchema(types, "Mail")


@pytest.mark.parametrize("fields", [
    "name string",
    [{"name": "x"}],
    [{"name": 1, "type": "uint8"}],
    ["uint8 x"],
])
def test_malformed_fields(fields):
    with pytest.raises(SchemaError):
        TypeSchema({"EIP712Domain": DOMAIN, "Mail": fields}, "Mail")


def test_from_payload_shape_errors():
    with pytest.raises(SchemaError):
        TypeSchema.from_payload(["not", "a", "mapping"])
    with pytest.raises(SchemaError, match="primaryType"):
        TypeSchema.from_payload({"types": {"EIP712Domain": DOMAIN}})
    with pytest.raises(SchemaError):
        TypeSchema.from_payload({"types": [], "primaryType": "Mail"})


def test_unreachable_types_are_ignored():
    types = {
        "EIP712Domain": DOMAIN,
        "Mail": [{"name": "contents", "type": "string"}],
        "Broken": [{"name": "x", "type": "Nowhere"}],
    }
    schema = TypeSchema(types, "Mail")
    assert not schema.is_struct_type("Broken")


def test_dependencies_first_encountered_order():
    types = {
        "EIP712Domain": DOMAIN,
        "Order": [{"name": "z", "type": "Zebra"}, {"name": "a", "type": "Apple[]"}],
        "Zebra": [{"name": "inner", "type": "Apple"}, {"name": "x", "type": "uint8"}],
        "Apple": [{"name": "s", "type": "string"}],
    }
    schema = TypeSchema(types, "Order")

    assert schema.dependencies("Order") == ["Order", "Zebra", "Apple"]
    assert schema.encode_type("Order") == (
        "Order(Zebra z,Apple[] a)Apple(string s)Zebra(Apple inner,uint8 x)"
    )


def test_recursive_type():
    types = {
        "EIP712Domain": DOMAIN,
        "Node": [{"name": "label", "type": "string"}, {"name": "children", "type": "Node[]"}],
    }
    schema = TypeSchema(types, "Node")

    assert schema.dependencies("Node") == ["Node"]
    assert schema.encode_type("Node") == "Node(string label,Node[] children)"


def test_encode_type_mail(mail_schema):
    assert mail_schema.encode_type("Mail") == (
        "Mail(Person from,Person to,string contents)Person(string name,address wallet)"
    )
    assert mail_schema.encode_type("EIP712Domain") == (
        "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
    )
