# schemata/conf/models.py

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistrySettings(BaseModel):
    """Typed registry configuration built from a :class:`~schemata.conf.settings.Settings` mapping."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Registration policy
    CONFLICT_POLICY: Literal["strict", "first_wins"] = "strict"
    RESOLVER: str = "schemata.registry.resolvers:TopologicalResolver"
    LINT_ON_REGISTER: bool = True

    # Duplicate detection
    DETECT_DUPLICATES: bool = False
    NORMALIZE_MAX_DEPTH: int = Field(default=10, ge=1)
    ENVELOPE_STATUS_FIELD: str = "status"
    ENVELOPE_PAYLOAD_FIELD: str = "data"
    GENERATED_PREFIXES: tuple[str, ...] = ("Output", "Input")
    GENERATED_SUFFIX: str = "Schema"
    GENERATED_ID_FIELD: str = "id"
    GENERATED_AUDIT_FIELDS: tuple[str, ...] = ("createdAt", "updatedAt")
    DISTINCT_PREFIXES: tuple[str, ...] = ()

    # Discovery
    DISCOVERY_PATHS: tuple[str, ...] = ("*.schemas",)

    @field_validator(
        "GENERATED_PREFIXES",
        "GENERATED_AUDIT_FIELDS",
        "DISTINCT_PREFIXES",
        "DISCOVERY_PATHS",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        # environment variables arrive as "a,b,c"
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RegistrySettings":
        return cls.model_validate({k: v for k, v in mapping.items() if k in cls.model_fields})
