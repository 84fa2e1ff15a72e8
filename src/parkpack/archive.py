from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence

from parkpack.errors import ArchiveFailed, ToolFailed
from parkpack.fsutil import path_exists, remove_path
from parkpack.process import run_process


class Archiver(Protocol):
    """Minimal interface for a zip archiver."""

    async def archive(
        self, cwd: Path, output: str, paths: Sequence[str], *, recurse: bool = False
    ) -> None:
        ...


@dataclass
class ZipArchiver:
    """Zip archiver backed by a platform CLI.

    Uses:
        7z a -tzip [-r] <output> <paths...>   on Windows
        zip [-r] <output> <paths...>          elsewhere

    ``output`` and ``paths`` are relative to ``cwd``. An existing archive at
    the target is deleted first, so the result holds exactly ``paths``.
    """

    platform: str = field(default_factory=lambda: sys.platform)

    def command(self, output: str, paths: Sequence[str], *, recurse: bool = False) -> tuple[str, list[str]]:
        extra_args = ["-r"] if recurse else []
        if self.platform == "win32":
            return "7z", ["a", "-tzip", *extra_args, output, *paths]
        return "zip", [*extra_args, output, *paths]

    async def archive(
        self, cwd: Path, output: str, paths: Sequence[str], *, recurse: bool = False
    ) -> None:
        """
        Package ``paths`` into the zip archive ``output``.

        Raises:
            ToolNotFound: If the archiver executable is missing
            ArchiveFailed: If the archiver exits with a non-zero code
        """
        target = Path(cwd) / output
        if await path_exists(target):
            await remove_path(target)
        name, args = self.command(output, paths, recurse=recurse)
        try:
            await run_process(name, args, cwd)
        except ToolFailed as e:
            raise ArchiveFailed(e.tool, e.output) from e
