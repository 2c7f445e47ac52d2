from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def expand_tilde(path: str) -> str:
    return path.replace("~", str(Path.home()))


def expanded_and_standardized_path(path: str | Path) -> Path:
    return Path(os.path.normpath(os.path.abspath(expand_tilde(str(path)))))


def output_path_for(path: str | Path, default_file_name: str) -> Path:
    """Resolve an output location; a path without a suffix names a directory."""
    resolved = expanded_and_standardized_path(path)
    if not resolved.suffix:
        return resolved / default_file_name

    expected_suffix = Path(default_file_name).suffix
    if resolved.suffix != expected_suffix:
        logger.warning(
            "Specified filename '%s' does not have the expected extension '%s'",
            resolved.name,
            expected_suffix.lstrip("."),
        )
    return resolved


def decode_json_file(path: str | Path, *, required: bool = False) -> Any | None:
    """Parse a JSON file; a missing optional file yields ``None``."""
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if required:
            raise
        return None
    return json.loads(raw)
