"""JSON schema checks for generic status objects before they are decoded."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping

from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
STATUS_SCHEMA = "proposal_status.schema.json"


@lru_cache(maxsize=None)
def _validator(schema_name: str) -> Draft202012Validator:
    schema_path = SCHEMA_DIR / schema_name
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def status_errors(status: Mapping[str, object], schema_name: str = STATUS_SCHEMA) -> list[str]:
    """Return ``location: message`` lines for every schema violation."""
    errors = []
    for error in sorted(_validator(schema_name).iter_errors(status), key=lambda e: list(e.path)):
        location = " -> ".join(str(part) for part in error.path) or "<root>"
        errors.append(f"{location}: {error.message}")
    return errors


def validate_statuses(
    statuses: Iterable[Mapping[str, object]],
    *,
    label: str = "status",
    schema_name: str = STATUS_SCHEMA,
) -> None:
    """Raise ``ValueError`` listing every invalid status, numbered from 1."""
    failures = []
    for index, status in enumerate(statuses, start=1):
        failures.extend(f"- {label} #{index} {error}" for error in status_errors(status, schema_name))
    if failures:
        raise ValueError("Schema validation failed:\n" + "\n".join(failures))
