"""Import helpers for dotted configuration values."""

from __future__ import annotations

import importlib
from typing import Any


def import_string(path: str) -> Any:
    """Import ``"pkg.module:attr"`` or ``"pkg.module.attr"`` and return the attribute.

    A path without an attribute part returns the module itself.
    """
    if not isinstance(path, str) or not path.strip():
        raise ImportError(f"Expected a dotted import path, got {path!r}")
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
        if not module_name:
            return importlib.import_module(attr)
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr) if attr else module
    except AttributeError as err:
        raise ImportError(f"Module {module_name!r} has no attribute {attr!r}") from err
