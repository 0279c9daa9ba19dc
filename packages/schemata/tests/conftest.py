import pytest

from schemata import InMemoryEngine, SchemaRegistry
from schemata.registry import clear_early_schemas, set_active_registry


@pytest.fixture
def engine() -> InMemoryEngine:
    return InMemoryEngine()


@pytest.fixture
def registry(engine) -> SchemaRegistry:
    return SchemaRegistry(engine)


@pytest.fixture
def dup_registry(engine) -> SchemaRegistry:
    return SchemaRegistry(engine, settings={"DETECT_DUPLICATES": True})


@pytest.fixture(autouse=True)
def _isolate_active_registry():
    set_active_registry(None)
    clear_early_schemas()
    yield
    set_active_registry(None)
    clear_early_schemas()
