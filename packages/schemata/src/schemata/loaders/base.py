"""Loader interface used for schema autodiscovery."""

from __future__ import annotations

from typing import Iterable


class BaseLoader:
    """Base loader responsible for finding and importing schema modules."""

    def read_configuration(self, settings) -> None:
        raise NotImplementedError

    def autodiscover(self, registry, modules: Iterable[str]) -> list[str]:
        raise NotImplementedError
