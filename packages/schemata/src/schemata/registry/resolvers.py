# schemata/registry/resolvers.py
"""
Dependency resolvers.

A resolver turns the pending ``id -> schema`` map into commit groups such that
every reference target is committed no later than its referrer. Each group
is a tuple of ids; a group with more than one id is a reference cycle and
must be committed as one unit.

Two strategies are available:

``TopologicalResolver`` (default)
    Orders the pending set automatically. Roots and edges are visited in
    lexicographic id order, so the result does not depend on the order the
    schemas were submitted in. Cycles become a single group.

``OrderedResolver``
    Keeps submission order and only checks it: every reference must point at
    an already known id or at a schema submitted earlier. Cycles between
    different schemas are therefore rejected.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from ..exceptions import UnresolvedReferenceError
from ..nodes import SchemaProtocol
from .references import references_by_id

logger = logging.getLogger(__name__)

__all__ = ["BaseResolver", "TopologicalResolver", "OrderedResolver"]

IsKnown = Callable[[str], bool]
Group = tuple[str, ...]


class BaseResolver:
    """Common helpers shared by both strategies."""

    #: True when registrations after the first flush go through an
    #: incremental resolve instead of being pushed (and checked) one by one.
    incremental: bool = False

    def resolve_groups(self, pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> list[Group]:
        raise NotImplementedError

    def resolve(self, pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> list[str]:
        """Flattened commit order."""
        return [schema_id for group in self.resolve_groups(pending, is_known) for schema_id in group]

    @staticmethod
    def unresolved(pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> list[tuple[str, str]]:
        """``(missing_id, referrer_id)`` pairs, sorted, for references nobody can satisfy."""
        missing: list[tuple[str, str]] = []
        for schema_id, targets in references_by_id(dict(pending)).items():
            for target in targets:
                if target not in pending and not is_known(target):
                    missing.append((target, schema_id))
        return sorted(missing, key=lambda pair: (pair[1], pair[0]))

    def blocked_ids(self, pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> set[str]:
        """Pending ids that depend, directly or through other pending schemas, on an unknown id."""
        refs = references_by_id(dict(pending))
        blocked = {referrer for _, referrer in self.unresolved(pending, is_known)}
        changed = bool(blocked)
        while changed:
            changed = False
            for schema_id, targets in refs.items():
                if schema_id not in blocked and any(t in blocked for t in targets):
                    blocked.add(schema_id)
                    changed = True
        return blocked

    def check(self, pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> None:
        """Raise for the first unresolvable reference, before anything is committed."""
        missing = self.unresolved(pending, is_known)
        if missing:
            target, referrer = missing[0]
            raise UnresolvedReferenceError(target, referrer)


class TopologicalResolver(BaseResolver):
    """Automatic ordering via Tarjan's strongly connected components."""

    incremental = True

    def resolve_groups(self, pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> list[Group]:
        self.check(pending, is_known)

        refs = references_by_id(dict(pending))
        # only edges inside the pending set matter for ordering
        edges = {
            schema_id: sorted(t for t in targets if t in pending)
            for schema_id, targets in refs.items()
        }

        index: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        groups: list[Group] = []

        def visit(root: str) -> None:
            # (node, next edge position) frames; chain length is not bounded by the recursion limit
            work: list[tuple[str, int]] = [(root, 0)]
            index[root] = lowlink[root] = len(index)
            stack.append(root)
            on_stack.add(root)

            while work:
                node, position = work[-1]
                targets = edges[node]
                if position < len(targets):
                    work[-1] = (node, position + 1)
                    target = targets[position]
                    if target not in index:
                        index[target] = lowlink[target] = len(index)
                        stack.append(target)
                        on_stack.add(target)
                        work.append((target, 0))
                    elif target in on_stack:
                        lowlink[node] = min(lowlink[node], index[target])
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])

                if lowlink[node] == index[node]:
                    members: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        members.append(member)
                        if member == node:
                            break
                    # popped in reverse; restore discovery order
                    groups.append(tuple(reversed(members)))

        for schema_id in sorted(edges):
            if schema_id not in index:
                visit(schema_id)

        cycles = [g for g in groups if len(g) > 1]
        if cycles:
            logger.debug("reference cycles: %s", "; ".join(",".join(g) for g in cycles))
        return groups


class OrderedResolver(BaseResolver):
    """Submission order, checked."""

    def resolve_groups(self, pending: Mapping[str, SchemaProtocol], is_known: IsKnown) -> list[Group]:
        seen: set[str] = set()
        groups: list[Group] = []
        for schema_id, targets in references_by_id(dict(pending)).items():
            for target in targets:
                if target == schema_id or target in seen or is_known(target):
                    continue
                raise UnresolvedReferenceError(target, schema_id)
            seen.add(schema_id)
            groups.append((schema_id,))
        return groups
