"""Default loader: expand module patterns, import the matches, bulk-discover their schemas."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, List

from .base import BaseLoader

logger = logging.getLogger(__name__)

_PATTERN_CHARS = frozenset("*?[")


class SchemaLoader(BaseLoader):
    """
    Finds schema modules by dotted name or glob pattern.

    ``"myapp.schemas"`` is imported as-is; ``"*.schemas"`` is matched against
    every ``sys.path`` entry (modules and packages alike). Import errors
    propagate: a schema module that fails to import is a startup failure.
    """

    def read_configuration(self, settings) -> None:
        settings.update_from_envvar("SCHEMATA_CONFIG_MODULE")
        settings.update_from_environ()

    def autodiscover(self, registry, modules: Iterable[str]) -> List[str]:
        imported: list[str] = []
        for module_name in self.resolve_modules(modules):
            registry.bulk_discover(importlib.import_module(module_name))
            imported.append(module_name)
        logger.debug("autodiscover imported %d module(s): %s", len(imported), ",".join(imported))
        return imported

    def resolve_modules(self, modules: Iterable[str]) -> list[str]:
        """Expand patterns and drop repeats, keeping first-seen order."""
        resolved: dict[str, None] = {}
        for entry in modules:
            if not entry:
                continue
            names = self._expand_pattern(entry) if _PATTERN_CHARS & set(entry) else [entry]
            resolved.update(dict.fromkeys(names))
        return list(resolved)

    def _expand_pattern(self, pattern: str) -> list[str]:
        matches: dict[str, None] = {}
        for base in self._search_roots():
            for name in self._match_in(base, pattern):
                if name not in matches and importlib.util.find_spec(name) is not None:
                    matches[name] = None
        return list(matches)

    @staticmethod
    def _search_roots() -> Iterator[Path]:
        for entry in sys.path:
            if entry and Path(entry).is_dir():
                yield Path(entry)

    @staticmethod
    def _match_in(base: Path, pattern: str) -> list[str]:
        relative = pattern.replace(".", "/")
        found: list[str] = []
        candidates = sorted(base.glob(f"{relative}.py")) + sorted(base.glob(f"{relative}/__init__.py"))
        for path in candidates:
            parts = path.relative_to(base).with_suffix("").parts
            if parts[-1] == "__init__":
                parts = parts[:-1]
            if parts and all(part.isidentifier() for part in parts):
                found.append(".".join(parts))
        return found


__all__ = ["SchemaLoader"]
