"""
Pydantic model for object manifests.

An object manifest is a JSON document with an optional ``id`` and an
optional ``images`` value. Every other key is carried through untouched so that a
rewritten manifest differs from its source only in ``images``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr


REFERENCE_PREFIX = "$LGX:"


class ImageKind(str, Enum):
    """
    Shape of an object's ``images`` value.

    ABSENT: no image data at all.
    RAW: a non-empty list of image descriptors still to be compiled.
    RESOLVED: anything else. A string, a list holding any string entry,
        an empty list or some other scalar is treated as already compiled.
    """

    ABSENT = "absent"
    RAW = "raw"
    RESOLVED = "resolved"


def classify_images(value: Any) -> ImageKind:
    """
    Classify an ``images`` value.

    A list is raw only when it is non-empty and none of its entries is a
    string; mixed lists count as resolved.

    Example:
        >>> classify_images([{"path": "a.png"}])
        <ImageKind.RAW: 'raw'>
        >>> classify_images("$LGX:images.dat[0..3]")
        <ImageKind.RESOLVED: 'resolved'>
    """
    if value is None:
        return ImageKind.ABSENT
    if isinstance(value, list) and value and not any(isinstance(entry, str) for entry in value):
        return ImageKind.RAW
    return ImageKind.RESOLVED


def needs_reprocessing(value: Any) -> bool:
    """Return True when ``value`` must go through the image compiler."""
    return classify_images(value) is ImageKind.RAW


@dataclass(frozen=True)
class CompiledReference:
    """
    Symbolic reference to a range of entries inside a compiled container.

    Attributes:
        file: Container file name, relative to the manifest's directory
        start: First entry index
        end: Last entry index (inclusive)
    """

    file: str
    start: int
    end: int

    @classmethod
    def for_entry_count(cls, file: str, entry_count: int) -> CompiledReference:
        return cls(file=file, start=0, end=entry_count - 1)

    def __str__(self) -> str:
        return f"{REFERENCE_PREFIX}{self.file}[{self.start}..{self.end}]"


class ObjectRecord(BaseModel):
    """
    One manifest discovered in the staged tree.

    The owning directory is a private attribute: it is attached at discovery
    and never appears in ``to_manifest()`` output.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    images: Any = None

    _owning_directory: Path | None = PrivateAttr(default=None)
    _key_order: list[str] = PrivateAttr(default_factory=list)

    @classmethod
    def from_manifest(cls, data: dict[str, Any], owning_directory: Path) -> ObjectRecord:
        record = cls.model_validate(data)
        record._key_order = list(data)
        record._owning_directory = Path(owning_directory)
        return record

    @property
    def owning_directory(self) -> Path:
        if self._owning_directory is None:
            raise ValueError(f"Object {self.label} has no owning directory")
        return self._owning_directory

    @property
    def label(self) -> str:
        """Identifier for log lines and archive names; falls back to the directory name."""
        if self.id is not None:
            return str(self.id)
        if self._owning_directory is not None:
            return self._owning_directory.name
        return "unknown"

    def to_manifest(self) -> dict[str, Any]:
        """
        Serialize back to a manifest dict.

        Keys keep the order of the source manifest; keys added since
        loading are appended.
        """
        data = self.model_dump(mode="json", exclude_unset=True)
        ordered: dict[str, Any] = {k: data[k] for k in self._key_order if k in data}
        for k, v in data.items():
            if k not in ordered:
                ordered[k] = v
        return ordered
