import pytest

from schemata import SchemaRegistry
from schemata.exceptions import MissingIdentifierError
from schemata.nodes import obj, ref, string
from schemata.registry import (
    add_schema,
    current_registry,
    flush_schemas,
    get_active_registry,
    push_active_registry,
    ref_schema,
    set_active_registry,
)
from schemata.registry.active import early_schemas


def test_early_schemas_are_replayed_on_bind(engine, caplog):
    add_schema(obj({"a": ref_schema("A")}, id="B"))
    add_schema(obj({"x": string()}, id="A"))
    assert [s.schema_id for s in early_schemas()] == ["B", "A"]

    registry = SchemaRegistry(engine)
    with caplog.at_level("INFO", logger="schemata.registry.active"):
        set_active_registry(registry)

    assert early_schemas() == ()
    assert registry.pending_ids() == ("B", "A")
    assert "2 early schema(s)" in caplog.text
    assert flush_schemas() == ("A", "B")


def test_add_schema_checks_id_without_registry():
    with pytest.raises(MissingIdentifierError):
        add_schema(obj({}))
    assert early_schemas() == ()


def test_add_schema_goes_to_active_registry(registry):
    set_active_registry(registry)
    schema = obj({}, id="Now")
    assert add_schema(schema) is schema
    assert registry.pending_ids() == ("Now",)


def test_push_is_scoped(registry):
    assert get_active_registry() is None
    with push_active_registry(registry) as bound:
        assert bound is registry
        assert current_registry.pending_count == 0
    assert get_active_registry() is None


def test_flush_without_registry_is_noop():
    assert flush_schemas() == ()


def test_current_registry_without_binding_raises():
    assert not current_registry
    with pytest.raises(LookupError):
        current_registry.flush()
