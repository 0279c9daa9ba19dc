import pytest

from schemata import InMemoryEngine
from schemata.exceptions import MissingIdentifierError
from schemata.nodes import obj, string
from schemata.registry import SchemaStore


def test_put_requires_id(engine):
    store = SchemaStore(engine)
    with pytest.raises(MissingIdentifierError):
        store.put(obj({"x": string()}))
    with pytest.raises(MissingIdentifierError):
        store.put(obj({"x": string()}, id="   "))
    assert len(store) == 0


def test_get_checks_pending_then_accepted_then_engine(engine):
    store = SchemaStore(engine)
    a = obj({"x": string()}, id="A")
    store.put(a)
    assert store.get("A") is a
    assert store.pending_items() == {"A": a}

    store.mark_registered("A")
    assert store.get("A") is a
    assert "A" not in store.pending

    outside = obj({"y": string()}, id="Outside")
    engine.add(outside)
    assert store.get("Outside") is outside
    assert store.get_local("Outside") is None
    assert store.get("Nope") is None


def test_is_registered_sees_engine_only_schemas():
    engine = InMemoryEngine()
    store = SchemaStore(engine)
    engine.add(obj({"x": string()}, id="Direct"))

    assert store.is_registered("Direct")
    assert not store.is_registered("Other")


def test_put_keeps_first_and_skips_registered(engine):
    store = SchemaStore(engine)
    first = obj({"x": string()}, id="A")
    second = obj({"x": string()}, id="A")
    store.put(first)
    store.put(second)
    assert store.get("A") is first

    store.mark_registered("A")
    store.put(second)
    assert "A" not in store.pending
    assert store.registered_ids() == ("A",)


def test_forget_drops_only_uncommitted(engine):
    store = SchemaStore(engine)
    a, b = obj({}, id="A"), obj({}, id="B")
    store.put(a)
    store.put(b)
    store.mark_registered("B")

    store.forget("A")
    store.forget("B")
    assert store.get_local("A") is None
    assert "A" not in store.pending
    assert store.get_local("B") is b


def test_clear(engine):
    store = SchemaStore(engine)
    store.put(obj({}, id="A"))
    store.mark_registered("A")
    store.clear()
    assert len(store) == 0
    assert store.registered_ids() == ()
