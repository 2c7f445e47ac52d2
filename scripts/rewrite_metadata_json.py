#!/usr/bin/env python3
"""Rewrite generic proposal metadata JSON into the compact published layout.

Every ``status`` object is decoded to surface malformed records, then the
payload is re-encoded and passed through the status compactor and the
implementation version reflow.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from evolution_metadata.config import RewriteConfig
from evolution_metadata.errors import DecodeError, RewriteError
from evolution_metadata.file_utilities import decode_json_file, output_path_for
from evolution_metadata.json_render import dumps_generic, render_compact
from evolution_metadata.json_rewriter import rewrite_metadata_json
from evolution_metadata.proposal_status import ProposalStatus
from evolution_metadata.schema_validator import validate_statuses
from evolution_metadata.status_codec import decode_status

DEFAULT_OUTPUT_NAME = "evolution.json"

console = Console(stderr=True)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rewrite proposal metadata JSON into the compact status layout.")
    parser.add_argument("--input", type=Path, required=True, help="Generic metadata JSON produced by the extractor.")
    parser.add_argument(
        "--output",
        required=True,
        help=f"Output file, or a directory to receive {DEFAULT_OUTPUT_NAME}.",
    )
    parser.add_argument("--validate", action="store_true", help="Validate every status object against its schema.")
    parser.add_argument("--strict", action="store_true", default=None, help="Fail on status blocks that cannot be compacted.")
    parser.add_argument("--group-size", type=int, default=None, help="Array elements per output line.")
    parser.add_argument("--array-field", default=None, help="Name of the array field to reflow.")
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Render the compact layout directly instead of rewriting the generic encoding.",
    )
    return parser.parse_args(argv)


def _status_holders(node: Any, status_field: str) -> list[dict[str, Any]]:
    holders: list[dict[str, Any]] = []
    if isinstance(node, dict):
        if isinstance(node.get(status_field), dict):
            holders.append(node)
        for value in node.values():
            holders.extend(_status_holders(value, status_field))
    elif isinstance(node, list):
        for item in node:
            holders.extend(_status_holders(item, status_field))
    return holders


def decode_statuses(payload: Any, config: RewriteConfig, *, validate: bool = False) -> list[ProposalStatus]:
    """Replace every status object in ``payload`` with its decoded value."""
    holders = _status_holders(payload, config.status_field)
    if validate:
        validate_statuses(holder[config.status_field] for holder in holders)
    decoded: list[ProposalStatus] = []
    for holder in holders:
        status = decode_status(holder[config.status_field])
        holder[config.status_field] = status
        decoded.append(status)
    return decoded


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    config = RewriteConfig.from_env().with_overrides(
        strict=args.strict,
        group_size=args.group_size,
        array_field=args.array_field,
    )

    try:
        payload = decode_json_file(args.input, required=True)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Failed to read {args.input}: {exc}[/red]")
        return 1

    try:
        statuses = decode_statuses(payload, config, validate=args.validate)
    except (DecodeError, ValueError) as exc:
        console.print(f"[red]Failed to decode statuses in {args.input}: {exc}[/red]")
        return 1

    try:
        if args.direct:
            rewritten = render_compact(payload, config)
        else:
            rewritten = rewrite_metadata_json(dumps_generic(payload), config)
    except RewriteError as exc:
        console.print(f"[red]Failed to rewrite {args.input}: {exc}[/red]")
        return 1

    output_path = output_path_for(args.output, DEFAULT_OUTPUT_NAME)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rewritten, encoding="utf-8")

    errors = sum(1 for status in statuses if status.is_error)
    console.print(f"[bold green]Wrote {output_path}[/bold green]")
    console.print(f"- Statuses decoded: {len(statuses)}")
    if errors:
        console.print(f"[yellow]- Error statuses: {errors}[/yellow]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
