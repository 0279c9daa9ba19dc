# schemata/registry/duplicates.py
"""Duplicate detection by structural equivalence."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..nodes import SchemaProtocol
from .normalize import DEFAULT_MAX_DEPTH, canonical
from .predicates import PairPredicate, SchemaPredicate

logger = logging.getLogger(__name__)

__all__ = ["DuplicateDetector"]


class DuplicateDetector:
    """
    Decide whether two different schema values are the same logical definition.

    ``is_duplicate`` is symmetric and ignores ids entirely, so renaming a
    schema never changes the verdict. Exclusions:

    * a schema matching any ``exempt`` predicate is never a duplicate;
    * a pair where both sides match the same ``peer_exempt`` predicate is skipped;
    * a pair accepted by any ``distinct`` predicate is skipped.
    """

    def __init__(
        self,
        *,
        exempt: Sequence[SchemaPredicate] = (),
        peer_exempt: Sequence[SchemaPredicate] = (),
        distinct: Sequence[PairPredicate] = (),
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.exempt = tuple(exempt)
        self.peer_exempt = tuple(peer_exempt)
        self.distinct = tuple(distinct)
        self.max_depth = max_depth

    @classmethod
    def from_settings(cls, settings) -> "DuplicateDetector":
        from .predicates import build_predicates

        exempt, peer_exempt, distinct = build_predicates(settings)
        return cls(
            exempt=exempt,
            peer_exempt=peer_exempt,
            distinct=distinct,
            max_depth=settings.NORMALIZE_MAX_DEPTH,
        )

    # --- exclusion rules ---

    def is_exempt(self, schema: SchemaProtocol) -> bool:
        return any(pred(schema) for pred in self.exempt)

    def _excluded_pair(self, a: SchemaProtocol, b: SchemaProtocol) -> bool:
        if self.is_exempt(a) or self.is_exempt(b):
            return True
        if any(pred(a) and pred(b) for pred in self.peer_exempt):
            return True
        # distinct predicates are asked both ways to keep the verdict symmetric
        return any(pred(a, b) or pred(b, a) for pred in self.distinct)

    # --- comparison ---

    def is_duplicate(self, a: SchemaProtocol, b: SchemaProtocol) -> bool:
        if a is b:
            return False
        if self._excluded_pair(a, b):
            return False
        return canonical(a, self.max_depth) == canonical(b, self.max_depth)

    def find_duplicates(
        self,
        schema: SchemaProtocol,
        candidates: Iterable[tuple[str, SchemaProtocol]],
    ) -> tuple[str, ...]:
        """
        Return the ids of ``candidates`` that duplicate ``schema``.

        :param schema: The newly registered schema.
        :param candidates: ``(id, schema)`` pairs to compare against.
        :return: Matching ids in candidate order.
        """
        if self.is_exempt(schema):
            return ()
        target = canonical(schema, self.max_depth)
        found: list[str] = []
        for candidate_id, candidate in candidates:
            if candidate is schema or not isinstance(candidate, SchemaProtocol):
                continue
            if self._excluded_pair(schema, candidate):
                continue
            if canonical(candidate, self.max_depth) == target:
                found.append(candidate_id)
        if found:
            logger.debug("duplicates of %r: %s", schema.schema_id, ",".join(found))
        return tuple(found)
