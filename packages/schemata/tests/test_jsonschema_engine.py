import pytest

from schemata import SchemaRegistry
from schemata.engines import JsonSchemaEngine
from schemata.exceptions import (
    EngineDuplicateError,
    EngineError,
    EngineReferenceError,
    EngineRejectionError,
)
from schemata.nodes import array, integer, obj, ref, string


@pytest.fixture
def js_engine() -> JsonSchemaEngine:
    return JsonSchemaEngine()


def test_registry_flush_into_jsonschema_engine(js_engine):
    registry = SchemaRegistry(js_engine)
    registry.register(obj({"owner": ref("User"), "members": array(ref("User"))}, id="Team"))
    registry.register(obj({"name": string(minLength=1)}, id="User"))

    assert registry.flush() == ("User", "Team")
    js_engine.validate("Team", {"owner": {"name": "ada"}, "members": [{"name": "bob"}]})
    assert not js_engine.is_valid("Team", {"owner": {"name": ""}, "members": []})


def test_validate_reports_errors(js_engine):
    js_engine.add(obj({"n": integer()}, id="Counter"))
    with pytest.raises(ValueError, match="Counter: validation failed"):
        js_engine.validate("Counter", {"n": "three"})


def test_mutual_references_need_a_group(js_engine):
    e = obj({"f": ref("F")}, required=[], id="E")
    f = obj({"e": ref("E")}, required=[], id="F")
    with pytest.raises(EngineReferenceError):
        js_engine.add(e)

    js_engine.add_group([e, f])
    assert js_engine.is_valid("E", {"f": {"e": {}}})
    assert set(js_engine.names()) == {"E", "F"}


def test_duplicates_and_bad_documents_are_rejected(js_engine):
    js_engine.add(obj({}, id="A"))
    with pytest.raises(EngineDuplicateError):
        js_engine.add(obj({}, id="A"))
    with pytest.raises(EngineError):
        js_engine.add(string(minLength="long", id="Bad"))


def test_engine_errors_become_rejections(js_engine):
    registry = SchemaRegistry(js_engine)
    registry.register(string(minLength="long", id="Bad"))
    with pytest.raises(EngineRejectionError) as exc:
        registry.flush()
    assert exc.value.schema_id == "Bad"


def test_unknown_schema_validator(js_engine):
    with pytest.raises(KeyError):
        js_engine.validator("Nope")
