"""Shared test doubles for the compiler and archiver."""

from __future__ import annotations

import json
import os
import zipfile
from pathlib import Path
from typing import Sequence

import pytest

from parkpack.errors import ManifestIntrospectionFailed


class FakeCompiler:
    """Compiler double: the container entry count is the image list length."""

    def __init__(self, report_count: bool = True) -> None:
        self.report_count = report_count
        self.calls: list[tuple[str, Path]] = []

    async def build(self, cwd: Path, manifest: str, output: str) -> None:
        self.calls.append(("build", cwd))
        images = json.loads((cwd / manifest).read_text(encoding="utf-8"))
        (cwd / output).write_bytes(len(images).to_bytes(4, "little"))

    async def entry_count(self, cwd: Path, container: str) -> int:
        self.calls.append(("details", cwd))
        if not self.report_count:
            raise ManifestIntrospectionFailed(container, "")
        return int.from_bytes((cwd / container).read_bytes(), "little")


class FakeArchiver:
    """Archiver double that writes real zip files with the zipfile module."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, str, list[str], bool]] = []
        self.snapshots: dict[str, list[str]] = {}

    async def archive(
        self, cwd: Path, output: str, paths: Sequence[str], *, recurse: bool = False
    ) -> None:
        cwd = Path(cwd)
        self.calls.append((cwd, output, list(paths), recurse))
        # Contents of cwd at the moment the archive is made
        self.snapshots[output] = sorted(p.name for p in cwd.iterdir())
        target = cwd / output
        if target.exists():
            target.unlink()
        with zipfile.ZipFile(target, "w") as zf:
            for rel in paths:
                full = cwd / rel
                if full.is_dir() and recurse:
                    for dirpath, _dirnames, filenames in os.walk(full):
                        for filename in filenames:
                            file_path = Path(dirpath) / filename
                            zf.write(file_path, file_path.relative_to(cwd).as_posix())
                elif full.is_file():
                    zf.write(full, Path(rel).as_posix())


def write_manifest(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def archiver() -> FakeArchiver:
    return FakeArchiver()
