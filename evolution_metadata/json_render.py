"""JSON serialization for proposal metadata.

``dumps_generic`` is the plain encoder whose layout the line rewriters expect.
``render_compact`` writes the rewritten layout straight from the values, so
``render_compact(payload) == rewrite_metadata_json(dumps_generic(payload))``
for payloads whose statuses are ``ProposalStatus`` values and whose grouped
array field holds scalars.
"""
from __future__ import annotations

import json
from typing import Any

from evolution_metadata.config import INDENT_UNIT, RewriteConfig
from evolution_metadata.proposal_status import ProposalStatus
from evolution_metadata.status_codec import encode_status, encode_status_nested

GENERIC_SEPARATORS = (",", " : ")


def _json_default(value: Any) -> Any:
    if isinstance(value, ProposalStatus):
        return encode_status(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps_generic(payload: Any) -> str:
    return json.dumps(
        payload,
        ensure_ascii=False,
        indent=INDENT_UNIT,
        separators=GENERIC_SEPARATORS,
        default=_json_default,
    )


def _scalar(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _key(key: Any) -> str:
    if not isinstance(key, str):
        key = json.dumps(key) if key is None or isinstance(key, bool) else str(key)
    return _scalar(key)


def _is_flat(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and not any(isinstance(item, (dict, list, tuple, ProposalStatus)) for item in value)
    )


class CompactRenderer:
    def __init__(self, config: RewriteConfig | None = None):
        self.config = config or RewriteConfig()
        self.unit = self.config.indent_unit

    def render(self, payload: Any) -> str:
        return self._render_value(payload, 0) + "\n"

    def _render_value(self, value: Any, level: int) -> str:
        if isinstance(value, ProposalStatus):
            return self._render_object(list(encode_status(value).items()), level)
        if isinstance(value, dict):
            return self._render_object(list(value.items()), level)
        if isinstance(value, (list, tuple)):
            return self._render_array(value, level)
        return _scalar(value)

    def _render_member(self, key: Any, value: Any, level: int) -> str:
        if key == self.config.status_field and isinstance(value, ProposalStatus):
            rendered = self._render_status(value, level)
        elif key == self.config.array_field and _is_flat(value):
            rendered = self._render_grouped(value, level)
        else:
            rendered = self._render_value(value, level)
        return f"{self.unit * level}{_key(key)} : {rendered}"

    def _render_object(self, items: list[tuple[Any, Any]], level: int, *, multiline_empty: bool = False) -> str:
        if not items:
            return "{\n" + self.unit * level + "}" if multiline_empty else "{}"
        members = ",\n".join(self._render_member(key, value, level + 1) for key, value in items)
        return "{\n" + members + "\n" + self.unit * level + "}"

    def _render_status(self, status: ProposalStatus, level: int) -> str:
        ((discriminator, fields),) = encode_status_nested(status).items()
        body = self._render_object(list(fields.items()), level + 1, multiline_empty=True)
        inner = self.unit * (level + 1)
        return "{\n" + f"{inner}{_key(discriminator)} : {body}" + "\n" + self.unit * level + "}"

    def _render_array(self, values: Any, level: int) -> str:
        if not values:
            return "[]"
        inner = self.unit * (level + 1)
        elements = ",\n".join(inner + self._render_value(item, level + 1) for item in values)
        return "[\n" + elements + "\n" + self.unit * level + "]"

    def _render_grouped(self, values: Any, level: int) -> str:
        last = len(values) - 1
        tokens = [_scalar(item) + ("," if index < last else "") for index, item in enumerate(values)]
        size = self.config.group_size
        inner = self.unit * (level + 1)
        lines = [inner + " ".join(tokens[start : start + size]) for start in range(0, len(tokens), size)]
        return "[\n" + "\n".join(lines) + "\n" + self.unit * level + "]"


def render_compact(payload: Any, config: RewriteConfig | None = None) -> str:
    return CompactRenderer(config).render(payload)
