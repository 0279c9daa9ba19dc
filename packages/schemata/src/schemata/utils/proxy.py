"""Lazy proxy to the object returned by a resolver at access time.

Modelled after Celery's ``Proxy`` helper. Used for :data:`schemata.current_registry`,
which forwards to whichever registry is active when it is touched.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator


class Proxy:
    """Proxy that defers all operations to the target resolved at access time.

    When the resolver yields ``None`` a :class:`LookupError` is raised with
    ``missing_message`` instead of a confusing ``AttributeError`` on ``None``.
    """

    __slots__ = ("_resolver", "_missing_message")

    def __init__(self, resolver: Callable[[], Any], *, missing_message: str = "proxy target is not set") -> None:
        self._resolver = resolver
        self._missing_message = missing_message

    def _get_current(self) -> Any:
        target = self._resolver()
        if target is None:
            raise LookupError(self._missing_message)
        return target

    def __getattr__(self, name: str) -> Any:
        return getattr(self._get_current(), name)

    def __getitem__(self, key: Any) -> Any:
        return self._get_current()[key]

    def __contains__(self, item: Any) -> bool:
        return item in self._get_current()

    def __iter__(self) -> Iterator[Any]:
        return iter(self._get_current())

    def __len__(self) -> int:
        return len(self._get_current())

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._get_current()(*args, **kwargs)

    def __bool__(self) -> bool:
        return self._resolver() is not None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        target = self._resolver()
        return f"Proxy({target!r})" if target is not None else "Proxy(<unbound>)"
