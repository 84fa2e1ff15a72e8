"""
Per-object and aggregate archives.

Each object directory holding an ``object.json`` becomes ``<id>.parkobj``
next to it. Whatever remains at the top of the staged root then goes into
one ``objects.zip``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from parkpack.archive import Archiver
from parkpack.fsutil import path_exists, remove_path
from parkpack.objects import ObjectRecord, ScanOptions, scan_tree

from .coordinator import fan_out
from .reprocess import OBJECT_MANIFEST

LOGGER = logging.getLogger(__name__)

PARKOBJ_SUFFIX = ".parkobj"
AGGREGATE_ARCHIVE = "objects.zip"


def parkobj_name(record: ObjectRecord) -> str:
    return f"{record.label}{PARKOBJ_SUFFIX}"


async def package_object(record: ObjectRecord, archiver: Archiver) -> None:
    """
    Archive an object directory into ``../<id>.parkobj`` and delete it.

    The archive holds the directory's contents, not the directory itself.
    """
    name = parkobj_name(record)
    LOGGER.info(f"Creating {name}", extra={"object_id": record.label})
    cwd = record.owning_directory
    entries = await scan_tree(cwd, ScanOptions(include_files=True, include_directories=True))
    await archiver.archive(cwd, f"../{name}", entries, recurse=True)
    await remove_path(cwd)


async def package_objects(
    records: Iterable[ObjectRecord],
    archiver: Archiver,
    *,
    parallel: bool = False,
) -> list[ObjectRecord]:
    """
    Package every record whose directory contains ``object.json``.

    The check runs right before each record is packaged, so a directory
    already archived and removed by an earlier record (a second manifest in
    the same directory, or a parent object) is skipped. Records sharing a
    directory are packaged once, under the first record.

    Returns:
        The records that were packaged
    """
    candidates: list[ObjectRecord] = []
    seen: set[Path] = set()
    for record in records:
        if record.owning_directory in seen:
            continue
        seen.add(record.owning_directory)
        candidates.append(record)

    packaged: list[ObjectRecord] = []

    async def handle(record: ObjectRecord) -> None:
        if not await path_exists(record.owning_directory / OBJECT_MANIFEST):
            return
        await package_object(record, archiver)
        packaged.append(record)

    await fan_out(candidates, handle, parallel=parallel)
    return packaged


async def package_remaining(
    root: Path,
    archiver: Archiver,
    archive_name: str = AGGREGATE_ARCHIVE,
) -> list[str]:
    """
    Archive every top-level directory under ``root`` into ``archive_name``.

    The archive is written inside ``root`` and each archived directory is
    deleted afterwards. Must only run after the per-object stage has
    finished, since that stage removes the directories it packaged.

    Returns:
        The archived directory names, relative to ``root``
    """
    LOGGER.info(f"Creating {archive_name}", extra={"root": str(root)})
    directories = await scan_tree(root, ScanOptions(include_directories=True))
    if not directories:
        LOGGER.info("Nothing left to archive", extra={"root": str(root)})
        return []
    await archiver.archive(root, archive_name, directories, recurse=True)
    for directory in directories:
        await remove_path(Path(root) / directory)
    return directories
