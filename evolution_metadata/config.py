from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_STATUS_FIELD = "status"
DEFAULT_ARRAY_FIELD = "implementationVersions"
DEFAULT_GROUP_SIZE = 10
INDENT_UNIT = "  "

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RewriteConfig:
    status_field: str = DEFAULT_STATUS_FIELD
    array_field: str = DEFAULT_ARRAY_FIELD
    group_size: int = DEFAULT_GROUP_SIZE
    indent_unit: str = INDENT_UNIT
    strict: bool = False

    def __post_init__(self) -> None:
        if self.group_size < 1:
            raise ValueError(f"group_size must be positive, got {self.group_size}.")

    @classmethod
    def from_env(cls) -> "RewriteConfig":
        return cls(
            status_field=os.getenv("EVOLUTION_STATUS_FIELD", DEFAULT_STATUS_FIELD),
            array_field=os.getenv("EVOLUTION_ARRAY_FIELD", DEFAULT_ARRAY_FIELD),
            group_size=int(os.getenv("EVOLUTION_GROUP_SIZE", str(DEFAULT_GROUP_SIZE))),
            strict=os.getenv("EVOLUTION_STRICT", "").strip().lower() in _TRUE_VALUES,
        )

    def with_overrides(self, **overrides: object) -> "RewriteConfig":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
