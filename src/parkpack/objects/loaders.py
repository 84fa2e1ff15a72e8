"""
Reading and writing object manifests.

Provides functions to load manifest JSON from disk, parse it into
ObjectRecord models and persist records back in the canonical format.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from parkpack.errors import FileSystemError, InvalidManifest

from .models import ObjectRecord

LOGGER = logging.getLogger(__name__)

MANIFEST_INDENT = 4


def dump_json(data: Any) -> str:
    """
    Render JSON in the persisted manifest format.

    Four-space indentation, non-ASCII characters kept as-is and a single
    trailing newline.

    Example:
        >>> dump_json({"id": "foo"})
        '{\\n    "id": "foo"\\n}\\n'
    """
    return json.dumps(data, indent=MANIFEST_INDENT, ensure_ascii=False) + "\n"


def _read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileSystemError(path, e.strerror or str(e)) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidManifest(path, str(e)) from e


def _write_json(path: Path, data: Any) -> None:
    try:
        path.write_text(dump_json(data), encoding="utf-8")
    except OSError as e:
        raise FileSystemError(path, e.strerror or str(e)) from e


async def read_json(path: Path) -> Any:
    """
    Load JSON from a file.

    Raises:
        FileSystemError: If the file cannot be read
        InvalidManifest: If the content is not valid JSON
    """
    return await asyncio.to_thread(_read_json, Path(path))


async def write_json(path: Path, data: Any) -> None:
    """Write ``data`` to ``path`` in the persisted manifest format."""
    LOGGER.debug(f"Writing {path}", extra={"path": str(path)})
    await asyncio.to_thread(_write_json, Path(path), data)


def parse_object(data: Any, owning_directory: Path, *, source: Path | None = None) -> ObjectRecord:
    """
    Parse a manifest dict into an ObjectRecord.

    Raises:
        InvalidManifest: If the data is not a JSON object with a string ``id``
    """
    where = source if source is not None else owning_directory
    if not isinstance(data, dict):
        raise InvalidManifest(where, "expected a JSON object")
    try:
        return ObjectRecord.from_manifest(data, owning_directory)
    except ValidationError as e:
        raise InvalidManifest(where, str(e)) from e


async def load_object(path: Path) -> ObjectRecord:
    """
    Load a manifest file and attach its directory as the owning directory.

    Example:
        >>> record = await load_object(Path("artifacts/rct2/foo/object.1.json"))
        >>> record.owning_directory
        PosixPath('artifacts/rct2/foo')
    """
    path = Path(path)
    data = await read_json(path)
    return parse_object(data, path.parent, source=path)


async def save_object(record: ObjectRecord, path: Path) -> None:
    """Persist a record; the owning directory is never written."""
    await write_json(path, record.to_manifest())
