import sys
import textwrap
import types

import pytest

from schemata.loaders import SchemaLoader
from schemata.nodes import obj, ref, string


def test_bulk_discover_filters_exports(registry):
    module = types.ModuleType("fake_schemas")
    module.User = obj({"name": string()}, id="User")
    module.Team = obj({"owner": ref("User")}, id="Team")
    module.Alias = module.User
    module._Private = obj({}, id="Private")
    module.default = obj({}, id="Default")
    module.Anonymous = obj({})
    module.helper = lambda: None
    module.NODE_TYPE = type(module.User)

    found = registry.bulk_discover(module)

    assert [s.schema_id for s in found] == ["User", "Team"]
    assert registry.pending_ids() == ("User", "Team")
    assert registry.flush() == ("User", "Team")


def test_bulk_discover_honours_dunder_all(registry):
    module = types.ModuleType("fake_all")
    module.Exported = obj({}, id="Exported")
    module.Hidden = obj({}, id="Hidden")
    module.__all__ = ["Exported"]

    registry.bulk_discover(module)
    assert registry.pending_ids() == ("Exported",)


def test_bulk_discover_accepts_mappings(registry):
    found = registry.bulk_discover({"A": obj({}, id="A"), "_b": obj({}, id="B"), "n": 3})
    assert [s.schema_id for s in found] == ["A"]


@pytest.mark.asyncio
async def test_abulk_discover(registry):
    found = await registry.abulk_discover({"A": obj({}, id="A")})
    assert [s.schema_id for s in found] == ["A"]


@pytest.fixture
def schema_package(tmp_path, monkeypatch):
    pkg = tmp_path / "discoverapp"
    pkg.mkdir()
    (pkg / "__init__.py").write_text("")
    (pkg / "schemas.py").write_text(
        textwrap.dedent(
            """
            from schemata.nodes import obj, ref, string

            Account = obj({"owner": ref("Person")}, id="Account")
            Person = obj({"name": string()}, id="Person")
            """
        )
    )
    other = tmp_path / "discoverother"
    other.mkdir()
    (other / "__init__.py").write_text("")
    (other / "schemas.py").write_text("from schemata.nodes import obj\nThing = obj({}, id='Thing')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield tmp_path
    for name in ("discoverapp", "discoverapp.schemas", "discoverother", "discoverother.schemas"):
        sys.modules.pop(name, None)


def test_autodiscover_by_module_name(registry, schema_package):
    imported = registry.autodiscover(["discoverapp.schemas"])
    assert imported == ["discoverapp.schemas"]
    assert registry.flush() == ("Person", "Account")


def test_autodiscover_expands_patterns(registry, schema_package):
    imported = SchemaLoader().autodiscover(registry, ["discover*.schemas"])
    assert set(imported) == {"discoverapp.schemas", "discoverother.schemas"}
    assert set(registry.pending_ids()) == {"Account", "Person", "Thing"}


def test_autodiscover_import_errors_propagate(registry, tmp_path, monkeypatch):
    broken = tmp_path / "brokenapp"
    broken.mkdir()
    (broken / "__init__.py").write_text("")
    (broken / "schemas.py").write_text("raise RuntimeError('boom')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    try:
        with pytest.raises(RuntimeError, match="boom"):
            registry.autodiscover(["brokenapp.schemas"])
    finally:
        sys.modules.pop("brokenapp", None)
        sys.modules.pop("brokenapp.schemas", None)


def test_resolve_modules_dedupes():
    loader = SchemaLoader()
    assert loader.resolve_modules(["a.schemas", "", "a.schemas", "b"]) == ["a.schemas", "b"]
