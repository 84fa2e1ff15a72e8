"""
Filesystem primitives for the staged tree.

Blocking calls run in a worker thread so they can be awaited alongside
child processes.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path

from parkpack.errors import FileSystemError

LOGGER = logging.getLogger(__name__)


def _remove(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        # Already gone
        return
    except OSError as e:
        raise FileSystemError(path, e.strerror or str(e)) from e


async def remove_path(path: Path) -> None:
    """
    Delete a file or a whole directory tree.

    A path that does not exist counts as already removed.

    Raises:
        FileSystemError: If the delete fails for any other reason
    """
    LOGGER.debug(f"Deleting {path}", extra={"path": str(path)})
    await asyncio.to_thread(_remove, Path(path))


def _copy(src: Path, dst: Path) -> None:
    try:
        shutil.copytree(src, dst)
    except OSError as e:
        raise FileSystemError(src, e.strerror or str(e)) from e


async def copy_tree(src: Path, dst: Path) -> None:
    """Copy the directory tree at ``src`` to a new directory ``dst``."""
    LOGGER.debug(f"Copying {src} to {dst}", extra={"src": str(src), "dst": str(dst)})
    await asyncio.to_thread(_copy, Path(src), Path(dst))


async def path_exists(path: Path) -> bool:
    return await asyncio.to_thread(Path(path).exists)
