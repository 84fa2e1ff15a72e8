"""
Object manifest models and utilities.

This module provides the ObjectRecord model together with loaders and the
concurrent directory scanner used to discover manifests.

Basic usage:
    >>> from parkpack.objects import discover_objects, needs_reprocessing
    >>>
    >>> records = await discover_objects("artifacts")
    >>> for record in records:
    ...     if needs_reprocessing(record.images):
    ...         print(f"{record.id} has raw images")
"""

from .models import (
    ObjectRecord,
    ImageKind,
    CompiledReference,
    classify_images,
    needs_reprocessing,
)
from .loaders import (
    dump_json,
    read_json,
    write_json,
    parse_object,
    load_object,
    save_object,
)
from .traversal import (
    ScanOptions,
    scan_tree,
    discover_objects,
)

__all__ = [
    # Models
    "ObjectRecord",
    "ImageKind",
    "CompiledReference",
    "classify_images",
    "needs_reprocessing",
    # Loaders
    "dump_json",
    "read_json",
    "write_json",
    "parse_object",
    "load_object",
    "save_object",
    # Traversal
    "ScanOptions",
    "scan_tree",
    "discover_objects",
]
