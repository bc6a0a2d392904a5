"""
report_io.py - Reading message batches and writing legacy reports.

Input files come in two layouts, both accepted by read_batch():
- a JSON array of envelopes (elements may be objects or JSON-encoded strings)
- NDJSON, one envelope per line (the Cucumber "message" formatter's output)

NDJSON lines are returned undecoded so that a single malformed line surfaces
later as a per-record DecodeFailure instead of failing the whole read.

Reports are written atomically: a temp file in the destination directory is
renamed over the target, so a failed write never leaves a partial report.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from cukejson.runtime.errors import BatchFormatError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_batch(path: PathLike) -> List[Any]:
    """Read a batch of envelopes from a JSON array or NDJSON file.

    Returns:
        The batch elements in file order (dicts or JSON strings).

    Raises:
        OSError: If the file cannot be read.
        BatchFormatError: If the file is empty, or is JSON but not an array.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        text = f.read()

    stripped = text.strip()
    if not stripped:
        raise BatchFormatError(f"Input file {path} is empty")

    if stripped.startswith("["):
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise BatchFormatError(f"Input file {path} is not a valid JSON array: {e}") from e
        if not isinstance(data, list):
            raise BatchFormatError(f"Input file {path} must contain a JSON array")
        logger.debug("Read %d envelopes (JSON array) from %s", len(data), path)
        return data

    lines = [line for line in stripped.splitlines() if line.strip()]
    logger.debug("Read %d envelopes (NDJSON) from %s", len(lines), path)
    return lines


async def read_batch_async(path: PathLike) -> List[Any]:
    """Read a batch without blocking the event loop."""
    return await asyncio.to_thread(read_batch, path)


def serialize_report(report: List[Dict[str, Any]], indent: Optional[int] = None) -> str:
    """Serialize a report; compact unless an indent is given."""
    if indent is None:
        return json.dumps(report, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(report, indent=indent, ensure_ascii=False)


def write_output(path: PathLike, serialized: str) -> Path:
    """Write a serialized report atomically, creating parent directories.

    Raises:
        OSError: If the destination cannot be written.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(suffix=".tmp", prefix=path.name + ".", dir=parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(serialized)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise

    logger.debug("Wrote report (%d bytes) to %s", len(serialized), path)
    return path
