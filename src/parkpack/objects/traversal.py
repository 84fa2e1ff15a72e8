"""
Directory scanning and object discovery.

``scan_tree`` lists a directory concurrently: every sub-directory listing
and every stat runs as its own task, and the scan returns only once all of
them have settled.
"""

from __future__ import annotations

import asyncio
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path

from parkpack.errors import FileSystemError

from .loaders import load_object
from .models import ObjectRecord


MANIFEST_NAME_RE = re.compile(r"^.+\..+\.json$")


@dataclass(frozen=True)
class ScanOptions:
    """
    What ``scan_tree`` reports.

    Attributes:
        include_files: Report regular files
        include_directories: Report directories
        recurse: Descend into sub-directories
        use_full_path: Report paths joined onto the scan root instead of
            paths relative to it
    """

    include_files: bool = False
    include_directories: bool = False
    recurse: bool = False
    use_full_path: bool = False


def _list_dir(path: str) -> list[str]:
    try:
        return os.listdir(path)
    except OSError as e:
        raise FileSystemError(path, e.strerror or str(e)) from e


async def scan_tree(root: Path | str, options: ScanOptions) -> list[str]:
    """
    List the contents of ``root``.

    Entries that cannot be stat'ed are left out silently. Sibling and
    recursion order are unspecified; the returned list is sorted.

    Raises:
        FileSystemError: If a directory cannot be listed

    Example:
        >>> await scan_tree("artifacts", ScanOptions(include_directories=True))
        ['rct2', 'rct2tt']
    """
    results: list[str] = []

    async def visit_entry(full_path: str, relative_path: str) -> None:
        try:
            st = await asyncio.to_thread(os.stat, full_path)
        except OSError:
            return
        result = full_path if options.use_full_path else relative_path
        if stat.S_ISDIR(st.st_mode):
            if options.include_directories:
                results.append(result)
            if options.recurse:
                await visit_dir(full_path, relative_path)
        elif options.include_files:
            results.append(result)

    async def visit_dir(directory: str, relative: str) -> None:
        names = await asyncio.to_thread(_list_dir, directory)
        await asyncio.gather(
            *(visit_entry(os.path.join(directory, name), os.path.join(relative, name)) for name in names)
        )

    await visit_dir(str(root), "")
    return sorted(results)


async def discover_objects(root: Path | str) -> list[ObjectRecord]:
    """
    Find and load every object manifest under ``root``.

    A manifest is a file whose name has the form ``<name>.<tag>.json``
    (for example ``object.1.json``). Each record's owning directory is the
    directory holding its manifest.
    """
    files = await scan_tree(root, ScanOptions(include_files=True, recurse=True, use_full_path=True))
    records: list[ObjectRecord] = []
    for file in files:
        if MANIFEST_NAME_RE.match(os.path.basename(file)):
            records.append(await load_object(Path(file)))
    return records
