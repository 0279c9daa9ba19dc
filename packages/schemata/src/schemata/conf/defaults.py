"""Default configuration values for schemata."""

DEFAULTS: dict[str, object] = {
    # Registration policy
    "CONFLICT_POLICY": "strict",
    "RESOLVER": "schemata.registry.resolvers:TopologicalResolver",
    "LINT_ON_REGISTER": True,
    # Duplicate detection (opt-in, O(n) per registration)
    "DETECT_DUPLICATES": False,
    "NORMALIZE_MAX_DEPTH": 10,
    "ENVELOPE_STATUS_FIELD": "status",
    "ENVELOPE_PAYLOAD_FIELD": "data",
    "GENERATED_PREFIXES": ("Output", "Input"),
    "GENERATED_SUFFIX": "Schema",
    "GENERATED_ID_FIELD": "id",
    "GENERATED_AUDIT_FIELDS": ("createdAt", "updatedAt"),
    "DISTINCT_PREFIXES": (),
    # Discovery
    "DISCOVERY_PATHS": ("*.schemas",),
}
