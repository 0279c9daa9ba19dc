"""Records kept by the registry for auditing.

Duplicate detection never blocks registration; its findings are logged and
kept as :class:`DuplicateReport` instances so startup code and tests can
inspect them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DuplicateReport:
    """A newly registered schema that is structurally equal to existing ones."""

    schema_id: str
    duplicates: tuple[str, ...]

    @property
    def message(self) -> str:
        return (
            f"Schema {self.schema_id!r} has the same structure as: {', '.join(self.duplicates)}. "
            "Consider merging them into a single shared schema."
        )


__all__ = ["DuplicateReport"]
