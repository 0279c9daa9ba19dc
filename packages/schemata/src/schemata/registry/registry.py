# schemata/registry/registry.py
"""
The schema registry facade.

Producers register schemas (or build references to schemas that may not exist
yet); the hosting application calls :meth:`SchemaRegistry.flush` once at
startup, which commits everything into the validation engine in an order the
engine can resolve. After the flush, new registrations go straight through.

Usage:
    from schemata import SchemaRegistry, InMemoryEngine, obj, string

    registry = SchemaRegistry(InMemoryEngine())
    registry.register(obj({"x": string()}, id="A"))
    registry.register(obj({"a": registry.reference("A")}, id="B"))
    registry.flush()   # commits A, then B
"""

from __future__ import annotations

import logging
from threading import RLock
from types import ModuleType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from asgiref.sync import sync_to_async

from ..conf import RegistrySettings, Settings
from ..engines.base import EnumerableEngine, GroupCommitEngine, ValidationEngine
from ..exceptions import ConflictingDefinitionError, EngineRejectionError, SchemaStructureError
from ..lint import format_violations, lint_schema
from ..nodes import RefSchema, SchemaProtocol, from_pydantic, ref
from ..tracing import registry_span
from ..utils import import_string
from .duplicates import DuplicateDetector
from .normalize import are_equivalent
from .records import DuplicateReport
from .resolvers import BaseResolver
from .store import SchemaStore, require_schema_id

if TYPE_CHECKING:
    from pydantic import BaseModel

logger = logging.getLogger(__name__)

__all__ = ["SchemaRegistry"]


def _coerce_settings(settings: Any) -> RegistrySettings:
    if settings is None:
        return Settings().validated()
    if isinstance(settings, RegistrySettings):
        return settings
    if isinstance(settings, Settings):
        return settings.validated()
    if isinstance(settings, Mapping):
        return Settings(settings).validated()
    raise TypeError(f"Unsupported settings object: {type(settings).__name__}")


class SchemaRegistry:
    """
    Accepts schemas by id, tracks their state and commits them into an engine.

    Every public operation runs under one coarse lock. A schema moves through
    ``pending`` (accepted, not yet in the engine) to ``registered`` exactly
    once; nothing is removed except by :meth:`reset`.
    """

    def __init__(
        self,
        engine: ValidationEngine,
        *,
        settings: RegistrySettings | Settings | Mapping[str, Any] | None = None,
        resolver: BaseResolver | None = None,
        detector: DuplicateDetector | None = None,
    ) -> None:
        self._lock = RLock()
        self.engine = engine
        self.settings = _coerce_settings(settings)
        self.store = SchemaStore(engine)

        if resolver is None:
            resolver = import_string(self.settings.RESOLVER)()
        self.resolver = resolver

        if detector is None and self.settings.DETECT_DUPLICATES:
            detector = DuplicateDetector.from_settings(self.settings)
        self.detector = detector

        self._flushed = False
        self._duplicate_reports: list[DuplicateReport] = []
        # commits always go through the engine's own add, even while routed
        self._engine_add = engine.add
        self._routed = False

    def __repr__(self) -> str:
        return (
            f"<SchemaRegistry engine={type(self.engine).__name__} "
            f"pending={len(self.store.pending)} flushed={self._flushed}>"
        )

    # --- registration ---

    def register(self, schema: SchemaProtocol) -> Any:
        """
        Register a schema under its id.

        Registering an equivalent schema under an existing id returns the first
        instance. A different schema under an existing id raises
        :class:`ConflictingDefinitionError` (``strict``) or keeps the first one
        (``first_wins``). After :meth:`flush` the schema is committed right away.

        :param schema: A schema value carrying a non-empty string id.
        :return: The registered schema (the first instance for repeats).
        :raises MissingIdentifierError: If the schema has no usable id.
        :raises ConflictingDefinitionError: On a strict-mode id collision.
        """
        schema_id = require_schema_id(schema)
        if not isinstance(schema, SchemaProtocol):
            raise SchemaStructureError(
                f"{type(schema).__name__} does not implement the schema interface (schema_id, kind, children)"
            )

        with self._lock:
            existing = self.store.get_local(schema_id)
            if existing is not None:
                return self._register_existing(schema_id, existing, schema)

            engine_copy = self.engine.get_by_name(schema_id)
            if engine_copy is not None:
                logger.debug("Schema %r already present in engine; marking registered", schema_id)
                self.store.mark_registered(schema_id)
                return engine_copy

            if self.settings.LINT_ON_REGISTER:
                self._lint(schema_id, schema)

            if self._flushed and not self.resolver.incremental:
                # checked before storing so a bad registration leaves no trace
                groups = self.resolver.resolve_groups({schema_id: schema}, self.store.is_registered)
                self.store.put(schema)
                try:
                    self._commit(groups, {schema_id: schema})
                except EngineRejectionError:
                    self.store.forget(schema_id)
                    raise
            else:
                self.store.put(schema)
                logger.debug("Queued schema %r (%d pending)", schema_id, len(self.store.pending))

            if self.detector is not None:
                self._detect_duplicates(schema_id, schema)

            if self._flushed and self.resolver.incremental:
                self._resolve_incremental()

            return schema

    async def aregister(self, schema: SchemaProtocol) -> Any:
        """Async wrapper around :meth:`register`."""
        return await sync_to_async(self.register)(schema)

    def register_many(self, schemas: Iterable[SchemaProtocol]) -> list[Any]:
        with self._lock:
            return [self.register(schema) for schema in schemas]

    def register_model(self, model: type["BaseModel"], *, schema_id: str | None = None) -> Any:
        """Register a Pydantic model class and the nested models it uses; return the model's schema."""
        nodes = from_pydantic(model, schema_id=schema_id)
        registered = self.register_many(nodes)
        return registered[-1]

    def _register_existing(self, schema_id: str, existing: SchemaProtocol, schema: SchemaProtocol) -> SchemaProtocol:
        if existing is schema or are_equivalent(existing, schema, self.settings.NORMALIZE_MAX_DEPTH):
            logger.debug("Schema %r already registered with the same definition; skipping", schema_id)
            return existing

        if self.settings.CONFLICT_POLICY == "strict":
            raise ConflictingDefinitionError(
                schema_id,
                f"Schema {schema_id!r} is already registered with a different definition. "
                "Rename one of them or reuse the existing schema.",
            )

        logger.warning(
            "Schema %r is already registered with a different definition; keeping the first one",
            schema_id,
        )
        return existing

    # --- references ---

    def reference(self, schema_id: str) -> RefSchema:
        """
        Return a reference node for ``schema_id``.

        The target does not have to exist yet; only resolving the reference
        at flush time can fail.
        """
        return ref(schema_id)

    # --- flush ---

    def flush(self) -> tuple[str, ...]:
        """
        Commit every pending schema into the engine.

        Runs once per registry lifetime; later calls return ``()``. Unresolved
        references are reported before anything is committed. If the engine
        rejects a schema the flush stops there, schemas committed so far stay
        committed and the registry remains unflushed.

        :return: Ids in commit order.
        :raises UnresolvedReferenceError: If a reference can't be satisfied.
        :raises EngineRejectionError: If the engine refuses a schema.
        """
        with self._lock:
            if self._flushed:
                logger.debug("flush: already flushed; nothing to do")
                return ()

            pending = self.store.pending_items()
            attributes = {
                "schemata.pending": len(pending),
                "schemata.resolver": type(self.resolver).__name__,
            }
            with registry_span("schemata.flush", attributes=attributes) as span:
                groups = self.resolver.resolve_groups(pending, self.store.is_registered)
                committed = self._commit(groups, pending)
                self._flushed = True
                span.set_attribute("schemata.committed", len(committed))

            logger.info(
                "Flushed %d schema(s) into %s: %s",
                len(committed),
                type(self.engine).__name__,
                ",".join(committed) or "-",
            )
            return tuple(committed)

    async def aflush(self) -> tuple[str, ...]:
        """Async wrapper around :meth:`flush`."""
        return await sync_to_async(self.flush)()

    def _resolve_incremental(self) -> list[str]:
        pending = self.store.pending_items()
        if not pending:
            return []
        blocked = self.resolver.blocked_ids(pending, self.store.is_registered)
        if blocked:
            logger.warning(
                "%d schema(s) wait for unregistered references: %s",
                len(blocked),
                ",".join(sorted(blocked)),
            )
        ready = {k: v for k, v in pending.items() if k not in blocked}
        groups = self.resolver.resolve_groups(ready, self.store.is_registered)
        return self._commit(groups, ready)

    def _commit(self, groups: Sequence[tuple[str, ...]], schemas: Mapping[str, SchemaProtocol]) -> list[str]:
        committed: list[str] = []
        for group in groups:
            batch = []
            for schema_id in group:
                if self.engine.get_by_name(schema_id) is not None:
                    logger.debug("Schema %r reached the engine by another path; skipping", schema_id)
                    self.store.mark_registered(schema_id)
                    continue
                batch.append(schema_id)
            if not batch:
                continue

            if len(batch) > 1 and isinstance(self.engine, GroupCommitEngine):
                try:
                    self.engine.add_group([schemas[i] for i in batch])
                except Exception as err:
                    self._reject(batch[0], err, group=batch)
                for schema_id in batch:
                    self.store.mark_registered(schema_id)
                    committed.append(schema_id)
                continue

            for schema_id in batch:
                try:
                    self._engine_add(schemas[schema_id])
                except Exception as err:
                    self._reject(schema_id, err)
                self.store.mark_registered(schema_id)
                committed.append(schema_id)
        return committed

    @staticmethod
    def _reject(schema_id: str, err: Exception, *, group: Sequence[str] = ()) -> None:
        if len(group) > 1:
            logger.error("Engine rejected schema group %s: %s", ",".join(group), err)
        else:
            logger.error("Engine rejected schema %r: %s", schema_id, err)
        raise EngineRejectionError(schema_id, str(err)) from err

    # --- discovery ---

    def bulk_discover(self, exports: ModuleType | Mapping[str, Any]) -> list[Any]:
        """
        Register every schema exported by a module (or found in a mapping).

        Private names and ``default`` are skipped. A value qualifies when it
        implements :class:`~schemata.nodes.SchemaProtocol` and carries an id.

        :param exports: A loaded module or a ``name -> value`` mapping.
        :return: The registered schemas, in export order.
        """
        if isinstance(exports, Mapping):
            bindings = list(exports.items())
            label = "<mapping>"
        else:
            namespace = vars(exports)
            names = getattr(exports, "__all__", None) or list(namespace)
            bindings = [(name, namespace[name]) for name in names if name in namespace]
            label = getattr(exports, "__name__", repr(exports))

        found: list[SchemaProtocol] = []
        seen: set[int] = set()
        for name, value in bindings:
            if name.startswith("_") or name == "default":
                continue
            if not _is_registrable(value) or id(value) in seen:
                continue
            seen.add(id(value))
            found.append(value)

        with registry_span("schemata.bulk_discover", attributes={"schemata.source": label}) as span:
            with self._lock:
                registered = [self.register(schema) for schema in found]
            span.set_attribute("schemata.discovered", len(registered))

        logger.debug("Discovered %d schema(s) in %s", len(registered), label)
        return registered

    async def abulk_discover(self, exports: ModuleType | Mapping[str, Any]) -> list[Any]:
        """Async wrapper around :meth:`bulk_discover`."""
        return await sync_to_async(self.bulk_discover)(exports)

    def autodiscover(self, patterns: Iterable[str] | None = None) -> list[str]:
        """Import modules matching ``patterns`` (default: ``DISCOVERY_PATHS``) and bulk-discover them."""
        from ..loaders import SchemaLoader

        if patterns is None:
            patterns = self.settings.DISCOVERY_PATHS
        return SchemaLoader().autodiscover(self, patterns)

    # --- lookups ---

    def get(self, schema_id: str) -> Any | None:
        return self.store.get(schema_id)

    def is_registered(self, schema_id: str) -> bool:
        return self.store.is_registered(schema_id)

    def registered_ids(self) -> tuple[str, ...]:
        return self.store.registered_ids()

    def pending_ids(self) -> tuple[str, ...]:
        return self.store.pending.ids()

    @property
    def pending_count(self) -> int:
        return len(self.store.pending)

    @property
    def is_flushed(self) -> bool:
        return self._flushed

    def unresolved_references(self) -> list[tuple[str, str]]:
        """``(missing_id, referrer_id)`` pairs among pending schemas."""
        with self._lock:
            return self.resolver.unresolved(self.store.pending_items(), self.store.is_registered)

    # --- duplicates ---

    @property
    def duplicate_reports(self) -> tuple[DuplicateReport, ...]:
        with self._lock:
            return tuple(self._duplicate_reports)

    def find_duplicates(self, schema: SchemaProtocol) -> tuple[str, ...]:
        """Ids of known schemas structurally equal to ``schema`` (works even when detection is off)."""
        detector = self.detector or DuplicateDetector.from_settings(self.settings)
        with self._lock:
            return detector.find_duplicates(schema, self._candidates(schema.schema_id))

    def _candidates(self, exclude_id: str | None) -> list[tuple[str, SchemaProtocol]]:
        candidates = [(k, v) for k, v in self.store.items().items() if k != exclude_id]
        if isinstance(self.engine, EnumerableEngine):
            local = {k for k, _ in candidates} | {exclude_id}
            for name in self.engine.names():
                if name in local:
                    continue
                value = self.engine.get_by_name(name)
                if isinstance(value, SchemaProtocol):
                    candidates.append((name, value))
        return candidates

    def _detect_duplicates(self, schema_id: str, schema: SchemaProtocol) -> None:
        duplicates = self.detector.find_duplicates(schema, self._candidates(schema_id))
        if duplicates:
            report = DuplicateReport(schema_id=schema_id, duplicates=duplicates)
            self._duplicate_reports.append(report)
            logger.warning(report.message)

    def _lint(self, schema_id: str, schema: SchemaProtocol) -> None:
        violations = lint_schema(schema)
        if violations:
            logger.warning(format_violations(violations, schema_id=schema_id))

    # --- engine routing ---

    def route_engine_add(self) -> None:
        """
        Send direct ``engine.add(schema)`` calls through :meth:`register`.

        Code that registers against the engine itself then gets queuing,
        ordering and conflict checks too. Undo with :meth:`restore_engine_add`.
        """
        with self._lock:
            if self._routed:
                return
            self.engine.add = self.register  # type: ignore[method-assign]
            self._routed = True
            logger.debug("Routing %s.add through the registry", type(self.engine).__name__)

    def restore_engine_add(self) -> None:
        with self._lock:
            if not self._routed:
                return
            self.engine.add = self._engine_add  # type: ignore[method-assign]
            self._routed = False

    # --- reset ---

    def reset(self) -> None:
        """Forget every schema and the flushed flag. Meant for test isolation."""
        with self._lock:
            self.restore_engine_add()
            self.store.clear()
            self._duplicate_reports.clear()
            self._flushed = False


def _is_registrable(value: Any) -> bool:
    if isinstance(value, type) or not isinstance(value, SchemaProtocol):
        return False
    schema_id = value.schema_id
    return isinstance(schema_id, str) and bool(schema_id.strip())
