"""
Error taxonomy for the packaging pipeline.

Every failure aborts the run; the CLI prints the message and exits 1.
"""

from __future__ import annotations

from pathlib import Path


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class ToolNotFound(PipelineError):
    """An external executable could not be located or spawned."""

    def __init__(self, tool: str) -> None:
        super().__init__(f"{tool} was not found")
        self.tool = tool


class ToolFailed(PipelineError):
    """An external executable ran and exited with a non-zero code."""

    def __init__(self, tool: str, output: str) -> None:
        super().__init__(f"{tool} failed:\n{output}")
        self.tool = tool
        self.output = output


class ArchiveFailed(ToolFailed):
    """The external archiver exited with a non-zero code."""


class ManifestIntrospectionFailed(PipelineError):
    """The compiler's details report did not contain an entry count."""

    def __init__(self, container: str, report: str) -> None:
        super().__init__(f"Unable to get number of images for gx file: {container}")
        self.container = container
        self.report = report


class FileSystemError(PipelineError):
    """A file operation failed for a reason other than a missing path."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class InvalidManifest(PipelineError):
    """A manifest file is not valid JSON or not a valid object record."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Invalid manifest {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
