import sys
import types

import pytest
from pydantic import ValidationError

from schemata import SchemaRegistry
from schemata.conf import DEFAULTS, RegistrySettings, Settings
from schemata.registry import TopologicalResolver


def test_defaults():
    settings = Settings()
    assert settings["CONFLICT_POLICY"] == "strict"
    assert settings["DETECT_DUPLICATES"] is False
    assert settings.validated() == RegistrySettings()
    assert set(settings.as_dict()) == set(DEFAULTS)


def test_layers_and_runtime_overrides():
    settings = Settings({"NORMALIZE_MAX_DEPTH": 5})
    assert settings["NORMALIZE_MAX_DEPTH"] == 5
    settings["NORMALIZE_MAX_DEPTH"] = 7
    assert settings["NORMALIZE_MAX_DEPTH"] == 7
    del settings["NORMALIZE_MAX_DEPTH"]
    assert settings["NORMALIZE_MAX_DEPTH"] == 5


def test_update_from_mapping_with_namespace():
    settings = Settings()
    settings.update_from_mapping({"SCHEMATA_DETECT_DUPLICATES": True, "OTHER": 1}, namespace="SCHEMATA")
    assert settings["DETECT_DUPLICATES"] is True
    assert "OTHER" not in settings


def test_update_from_envvar(monkeypatch):
    module = types.ModuleType("schemata_test_config")
    module.CONFLICT_POLICY = "first_wins"
    module.lowercase = "ignored"
    monkeypatch.setitem(sys.modules, "schemata_test_config", module)
    monkeypatch.setenv("SCHEMATA_CONFIG_MODULE", "schemata_test_config")

    settings = Settings()
    settings.update_from_envvar()
    assert settings["CONFLICT_POLICY"] == "first_wins"
    assert "lowercase" not in settings


def test_update_from_environ_coerces_on_validation():
    settings = Settings()
    settings.update_from_environ(
        {
            "SCHEMATA_DETECT_DUPLICATES": "true",
            "SCHEMATA_DISTINCT_PREFIXES": "Query, Output",
            "SCHEMATA_UNKNOWN": "x",
        }
    )
    validated = settings.validated()
    assert validated.DETECT_DUPLICATES is True
    assert validated.DISTINCT_PREFIXES == ("Query", "Output")
    assert "UNKNOWN" not in settings


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        Settings({"CONFLICT_POLICY": "last_wins"}).validated()
    with pytest.raises(ValidationError):
        RegistrySettings(NORMALIZE_MAX_DEPTH=0)


def test_registry_accepts_every_settings_form(engine):
    for settings in (None, {"DETECT_DUPLICATES": True}, Settings(), RegistrySettings()):
        registry = SchemaRegistry(engine, settings=settings)
        assert isinstance(registry.resolver, TopologicalResolver)
    assert SchemaRegistry(engine, settings={"DETECT_DUPLICATES": True}).detector is not None
    assert SchemaRegistry(engine).detector is None
    with pytest.raises(TypeError):
        SchemaRegistry(engine, settings=42)


def test_loader_reads_environment(monkeypatch):
    from schemata.loaders import SchemaLoader

    monkeypatch.setenv("SCHEMATA_CONFLICT_POLICY", "first_wins")
    monkeypatch.delenv("SCHEMATA_CONFIG_MODULE", raising=False)
    settings = Settings()
    SchemaLoader().read_configuration(settings)
    assert settings.validated().CONFLICT_POLICY == "first_wins"
