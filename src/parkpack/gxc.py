from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from parkpack.errors import ManifestIntrospectionFailed
from parkpack.process import run_process

DEFAULT_COMPILER = "gxc"

_NUM_ENTRIES_RE = re.compile(r"numEntries: ([0-9]+)")


class ImageCompiler(Protocol):
    """Minimal interface for an image container compiler."""

    async def build(self, cwd: Path, manifest: str, output: str) -> None:
        ...

    async def entry_count(self, cwd: Path, container: str) -> int:
        ...


def parse_entry_count(report: str) -> int | None:
    """Extract ``numEntries: <n>`` from a details report."""
    m = _NUM_ENTRIES_RE.search(report)
    if m:
        return int(m.group(1))
    return None


@dataclass
class GxcCompiler:
    """gxc-backed compiler using the gxc CLI.

    Uses the commands:
        gxc build <output> <manifest>
        gxc details <container>

    The details report is human-readable; only its ``numEntries`` line is read.
    """

    executable: str = DEFAULT_COMPILER
    logger: logging.Logger | None = None

    async def build(self, cwd: Path, manifest: str, output: str) -> None:
        """Compile the image manifest in ``cwd`` into the container ``output``."""
        await run_process(self.executable, ["build", output, manifest], cwd)

    async def entry_count(self, cwd: Path, container: str) -> int:
        """Return the number of entries in ``container``."""
        report = await run_process(self.executable, ["details", container], cwd)
        count = parse_entry_count(report)
        if count is None:
            if self.logger:
                self.logger.info(
                    "gxc_no_entry_count",
                    extra={"container": container, "cwd": str(cwd)},
                )
            raise ManifestIntrospectionFailed(container, report)
        return count
