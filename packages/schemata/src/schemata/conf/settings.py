"""Layered registry settings.

Lookup order, highest first:

1. values set at runtime (``settings["KEY"] = ...`` or :meth:`Settings.update_from_mapping`)
2. layers passed to the constructor
3. :data:`schemata.conf.defaults.DEFAULTS`

A module named by ``SCHEMATA_CONFIG_MODULE`` and individual ``SCHEMATA_<KEY>``
environment variables can be folded into the runtime layer.
"""


import importlib
import os
from collections import ChainMap
from typing import TYPE_CHECKING, Any, Iterator, Mapping, MutableMapping

from .defaults import DEFAULTS

if TYPE_CHECKING:
    from .models import RegistrySettings

ENV_PREFIX = "SCHEMATA"


class Settings(MutableMapping[str, Any]):
    """Layered settings with defaults and optional overlays."""

    def __init__(self, *layers: Mapping[str, Any]) -> None:
        self._storage = ChainMap({}, *(dict(layer) for layer in layers), dict(DEFAULTS))

    # Mapping protocol -------------------------------------------------
    def __getitem__(self, key: str) -> Any:
        return self._storage[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._storage.maps[0][key] = value

    def __delitem__(self, key: str) -> None:
        del self._storage.maps[0][key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    # Loading ----------------------------------------------------------
    def update_from_object(self, obj: str, *, namespace: str | None = None) -> None:
        module = importlib.import_module(obj)
        self.update_from_mapping(_filter_by_namespace(vars(module), namespace))

    def update_from_envvar(self, envvar: str = f"{ENV_PREFIX}_CONFIG_MODULE", *, namespace: str | None = None) -> None:
        module_name = os.environ.get(envvar)
        if not module_name:
            return
        self.update_from_object(module_name, namespace=namespace)

    def update_from_environ(self, environ: Mapping[str, str] | None = None) -> None:
        """Fold ``SCHEMATA_<KEY>`` variables for known keys into the runtime layer.

        Values stay strings here; :meth:`validated` coerces them.
        """
        environ = os.environ if environ is None else environ
        found = _filter_by_namespace(environ, ENV_PREFIX)
        self._storage.maps[0].update({k: v for k, v in found.items() if k in DEFAULTS})

    def update_from_mapping(self, mapping: Mapping[str, Any], *, namespace: str | None = None) -> None:
        self._storage.maps[0].update(_filter_by_namespace(mapping, namespace))

    # Views ------------------------------------------------------------
    def as_dict(self) -> dict[str, Any]:
        return dict(self._storage)

    def validated(self) -> "RegistrySettings":
        """Return the typed, validated view consumed by the registry."""
        from .models import RegistrySettings

        return RegistrySettings.from_mapping(self)


def _filter_by_namespace(mapping: Mapping[str, Any], namespace: str | None) -> dict[str, Any]:
    if namespace is None:
        return {k: v for k, v in mapping.items() if k.isupper()}

    prefix = f"{namespace}_"
    return {key[len(prefix):]: value for key, value in mapping.items() if key.startswith(prefix)}
