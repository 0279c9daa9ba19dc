from typing import Optional

import pytest
from pydantic import BaseModel

from schemata.exceptions import SchemaStructureError
from schemata.nodes import (
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    UnionSchema,
    array,
    from_json_schema,
    from_pydantic,
    integer,
    obj,
    ref,
    string,
    to_json_schema,
    union,
)


def test_to_json_schema_renders_root_id_and_refs():
    schema = obj(
        {"name": string(minLength=1), "tags": array(string()), "owner": ref("User")},
        required=["name"],
        id="Team",
        description="A team",
    )
    assert to_json_schema(schema) == {
        "$id": "Team",
        "type": "object",
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "tags": {"type": "array", "items": {"type": "string"}},
            "owner": {"$ref": "User"},
        },
        "required": ["name"],
        "description": "A team",
    }


def test_to_json_schema_unions_and_comment():
    node = union(string(), integer(), mode="one_of", comment="either")
    assert to_json_schema(node) == {"oneOf": [{"type": "string"}, {"type": "integer"}], "$comment": "either"}


def test_inline_cycles_cannot_be_rendered():
    node = ObjectSchema(id="Loop")
    node.properties = {"self": node}
    with pytest.raises(SchemaStructureError):
        to_json_schema(node)


def test_from_json_schema_parses_local_refs():
    node = from_json_schema(
        {
            "$id": "Order",
            "type": "object",
            "properties": {
                "lines": {"type": "array", "items": {"$ref": "#/$defs/Line"}},
                "customer": {"$ref": "#/definitions/Customer"},
                "note": {"type": ["string", "null"]},
                "extra": {"type": "object", "additionalProperties": {"type": "integer"}},
            },
            "required": ["lines"],
        }
    )
    assert isinstance(node, ObjectSchema) and node.id == "Order"
    lines = node.properties["lines"]
    assert isinstance(lines, ArraySchema) and isinstance(lines.items, RefSchema)
    assert lines.items.target == "Line"
    assert node.properties["customer"].target == "Customer"
    note = node.properties["note"]
    assert isinstance(note, UnionSchema) and [m.type for m in note.members] == ["string", "null"]
    assert isinstance(node.properties["extra"].additional_properties, PrimitiveSchema)
    assert node.required == ["lines"]


def test_from_json_schema_rejects_non_objects():
    with pytest.raises(SchemaStructureError):
        from_json_schema({"properties": {"x": 3}})


class Address(BaseModel):
    street: str
    city: str


class Person(BaseModel):
    name: str
    address: Address
    previous: Optional[Address] = None


def test_from_pydantic_splits_defs_dependencies_first():
    nodes = from_pydantic(Person)
    assert [n.id for n in nodes] == ["Address", "Person"]
    person = nodes[-1]
    assert person.properties["address"].target == "Address"
    assert sorted(person.required) == ["address", "name"]


def test_register_model(registry, engine):
    schema = registry.register_model(Person, schema_id="PersonSchema")
    assert schema.id == "PersonSchema"
    assert registry.flush() == ("Address", "PersonSchema")
    assert engine.commit_order == ("Address", "PersonSchema")
