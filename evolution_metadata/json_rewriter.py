"""Line rewriters applied to pretty-printed proposal metadata JSON.

The generic encoder cannot key a status object by its discriminator, and it
writes every array element on its own line. These rewriters patch its output:

- ``compact_status_blocks`` turns ``{"state": "<x>", ...}`` into ``{"<x>": {...}}``;
- ``reflow_array`` packs the designated array field into fixed-width groups.

Both match on layout, not on parsed JSON. They expect two-space indentation,
``"key" : value`` separators and a trailing comma after every member but the last.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from functools import partial
from typing import Callable, Iterable

from evolution_metadata.config import RewriteConfig
from evolution_metadata.errors import RewriteError
from evolution_metadata.proposal_status import STATUS_STATES
from evolution_metadata.status_codec import DISCRIMINATOR_KEY

logger = logging.getLogger(__name__)

Rewriter = Callable[[str], str]

_BLOCK_CLOSE = re.compile(r"^\s*},?\s*$")
_ARRAY_CLOSE = re.compile(r"^\s*\],?\s*$")
_TRAILING_COMMA = re.compile(r",(\s*)$")
_DISCRIMINATOR = re.compile(rf'^(\s*)"{DISCRIMINATOR_KEY}" : "(.*)"(,?)\s*$')
_NESTED_STATE_OPEN = re.compile(
    r'^\s*"(?:' + "|".join(re.escape(state) for state in STATUS_STATES) + r')" : \{\s*$'
)


class ScanState(Enum):
    NORMAL = "normal"
    IN_STATUS_BLOCK = "in_status_block"


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _status_open_pattern(config: RewriteConfig) -> re.Pattern[str]:
    return re.compile(rf'^\s*"{re.escape(config.status_field)}"\s*:\s*{{\s*$')


def _array_open_pattern(config: RewriteConfig) -> re.Pattern[str]:
    return re.compile(rf'"{re.escape(config.array_field)}" : \[\s*$')


def _report_unrewritten_block(config: RewriteConfig, opened_at: int, detail: str) -> None:
    message = f"Status block opened at line {opened_at} {detail}; block left unchanged."
    if config.strict:
        raise RewriteError(message, line_no=opened_at)
    logger.warning(message)


def _is_nested_block(pending: list[str]) -> bool:
    return bool(pending) and _NESTED_STATE_OPEN.match(pending[0]) is not None


def compact_status_blocks(text: str, config: RewriteConfig | None = None) -> str:
    """Nest each status block's fields under its discriminator value.

    Lines seen before the discriminator are held back until it shows up, then
    re-emitted one level deeper. Blocks that are already nested pass through
    untouched. Any other block that closes without a discriminator is emitted as
    it was, with a warning, or raises ``RewriteError`` in strict mode.
    """
    config = config or RewriteConfig()
    status_open = _status_open_pattern(config)
    unit = config.indent_unit

    output: list[str] = []
    state = ScanState.NORMAL
    pending: list[str] = []
    nested_indent: str | None = None
    opened_at = 0

    for line_no, line in enumerate(_split_lines(text), start=1):
        if state is ScanState.NORMAL:
            output.append(line)
            if status_open.match(line):
                state = ScanState.IN_STATUS_BLOCK
                pending = []
                nested_indent = None
                opened_at = line_no
            continue

        if _BLOCK_CLOSE.match(line):
            if nested_indent is None and not _is_nested_block(pending):
                _report_unrewritten_block(config, opened_at, "closed without a discriminator")
            if nested_indent is None:
                output.extend(pending)
            else:
                output.append(f"{nested_indent}}}")
            output.append(line)
            state = ScanState.NORMAL
            pending = []
            continue

        if nested_indent is not None:
            output.append(unit + line)
            continue

        match = _DISCRIMINATOR.match(line)
        if match is None:
            pending.append(line)
            continue

        nested_indent, value, comma = match.groups()
        output.append(f'{nested_indent}"{value}" : {{')
        # Held-back members end the nested object unless more follow the discriminator;
        # either way the nested object stays valid JSON.
        if pending and not comma:
            pending[-1] = _TRAILING_COMMA.sub(r"\1", pending[-1])
        output.extend(unit + held for held in pending)
        pending = []

    if state is ScanState.IN_STATUS_BLOCK:
        _report_unrewritten_block(config, opened_at, "never closed")
        output.extend(pending)

    return "".join(f"{line}\n" for line in output)


def reflow_array(text: str, config: RewriteConfig | None = None) -> str:
    """Pack the elements of the configured array field ``group_size`` to a line."""
    config = config or RewriteConfig()
    array_open = _array_open_pattern(config)

    chunks: list[str] = []
    in_array = False
    item_count = 0

    for line in _split_lines(text):
        if not in_array:
            chunks.append(f"{line}\n")
            if array_open.search(line):
                in_array = True
                item_count = 0
            continue

        if _ARRAY_CLOSE.match(line):
            if item_count:
                chunks.append("\n")
            chunks.append(f"{line}\n")
            in_array = False
            continue

        if item_count == 0:
            chunks.append(line)
        elif item_count % config.group_size == 0:
            chunks.append(f"\n{line}")
        else:
            # The source line already carries its separating comma.
            chunks.append(f" {line.strip()}")
        item_count += 1

    if in_array and item_count:
        logger.warning("Array field '%s' was never closed.", config.array_field)
        chunks.append("\n")

    return "".join(chunks)


def apply_rewriters(rewriters: Iterable[Rewriter], text: str) -> str:
    rewritten = text
    for rewriter in rewriters:
        rewritten = rewriter(rewritten)
    return rewritten


def apply_rewriters_to_bytes(rewriters: Iterable[Rewriter], data: bytes) -> bytes:
    source = data.decode("utf-8", errors="replace")
    return apply_rewriters(rewriters, source).encode("utf-8")


def default_rewriters(config: RewriteConfig | None = None) -> list[Rewriter]:
    config = config or RewriteConfig()
    return [
        partial(compact_status_blocks, config=config),
        partial(reflow_array, config=config),
    ]


def rewrite_metadata_json(text: str, config: RewriteConfig | None = None) -> str:
    return apply_rewriters(default_rewriters(config), text)
