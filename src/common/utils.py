"""
Shared utility functions for timestamps, filenames and JSON-lines file I/O.
"""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from common.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def compact_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as a sortable, path-safe timestamp with microseconds.

    Args:
        moment (datetime, optional): Defaults to now (UTC).

    Returns:
        str: e.g. '20240131T120501123456'.
    """
    moment = moment or utc_now()
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%S%f")


def safe_filename(filename: str, default: str = "upload") -> str:
    """
    Reduce a client supplied filename to a safe object-name component.

    Strips any directory part and replaces characters outside [A-Za-z0-9._-].

    Args:
        filename (str): Original filename.
        default (str): Fallback when nothing usable remains.

    Returns:
        str: Sanitized filename.
    """
    base = re.split(r"[\\/]", filename or "")[-1]
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", base).strip("._")
    return cleaned or default


def write_json_lines(file_path: str, rows: Iterable[dict]) -> int:
    """
    Write dictionaries to a file as UTF-8 JSON lines, replacing its contents.

    Args:
        file_path (str): Destination path. Parent directories are created.
        rows (Iterable[dict]): Rows to serialize.

    Returns:
        int: Number of rows written.
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False))
            f.write("\n")
            count += 1
    logger.debug("Wrote JSON lines", extra={"path": str(path), "rows": count})
    return count


def read_json_lines(file_path: str) -> List[dict]:
    """
    Read a UTF-8 JSON-lines file. Blank lines are skipped.

    Args:
        file_path (str): Path to the file.

    Returns:
        List[dict]: Parsed rows.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line is not a JSON object.
    """
    rows = []
    with open(file_path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            row = json.loads(line)
            if not isinstance(row, dict):
                raise ValueError(f"{file_path}:{lineno} is not a JSON object")
            rows.append(row)
    return rows
