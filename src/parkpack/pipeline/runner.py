"""
End-to-end pipeline run.

Stages run strictly one after another: stage the working tree, discover
objects, reprocess, package objects, package what remains. Each stage
finishes completely before the next begins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from parkpack.archive import Archiver, ZipArchiver
from parkpack.fsutil import copy_tree, remove_path
from parkpack.gxc import GxcCompiler, ImageCompiler
from parkpack.objects import discover_objects

from .packaging import AGGREGATE_ARCHIVE, package_objects, package_remaining
from .reprocess import reprocess_objects

LOGGER = logging.getLogger(__name__)

DEFAULT_SOURCE_ROOT = Path("objects")
DEFAULT_STAGING_ROOT = Path("artifacts")


@dataclass(frozen=True)
class PipelineOptions:
    """
    Read-only configuration for one run.

    Attributes:
        parallel: Fan out reprocessing and per-object packaging
        verbose: Log tool invocations and file operations
        source_root: Input tree, never modified
        staging_root: Working copy, recreated on every run
        aggregate_archive: Name of the final archive inside the staging root
    """

    parallel: bool = False
    verbose: bool = False
    source_root: Path = DEFAULT_SOURCE_ROOT
    staging_root: Path = DEFAULT_STAGING_ROOT
    aggregate_archive: str = AGGREGATE_ARCHIVE


async def stage_tree(source_root: Path, staging_root: Path) -> None:
    """Replace ``staging_root`` with a fresh copy of ``source_root``."""
    await remove_path(staging_root)
    await copy_tree(source_root, staging_root)


async def run_pipeline(
    options: PipelineOptions,
    *,
    compiler: ImageCompiler | None = None,
    archiver: Archiver | None = None,
) -> None:
    """
    Run every stage over the staged tree.

    Any failure aborts the run. Partial output is left in place.

    Parameters:
        options: Run configuration
        compiler: Image compiler (default: gxc)
        archiver: Zip archiver (default: platform zip CLI)

    Example:
        >>> asyncio.run(run_pipeline(PipelineOptions(parallel=True)))
    """
    compiler = compiler if compiler is not None else GxcCompiler(logger=LOGGER)
    archiver = archiver if archiver is not None else ZipArchiver()
    root = Path(options.staging_root)

    await stage_tree(Path(options.source_root), root)
    records = await discover_objects(root)
    LOGGER.debug(f"Discovered {len(records)} object(s)", extra={"count": len(records)})

    await reprocess_objects(records, compiler, parallel=options.parallel)
    await package_objects(records, archiver, parallel=options.parallel)
    await package_remaining(root, archiver, options.aggregate_archive)
