"""
Compile raw image lists into image containers.

For every object whose ``images`` value is a raw list, the list is handed
to the image compiler and replaced by a symbolic reference to the compiled
container. The rewritten manifest is persisted as ``object.json``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from parkpack.fsutil import remove_path
from parkpack.gxc import ImageCompiler
from parkpack.objects import CompiledReference, ObjectRecord, needs_reprocessing, save_object, write_json

from .coordinator import fan_out

LOGGER = logging.getLogger(__name__)

OBJECT_MANIFEST = "object.json"
IMAGE_MANIFEST = "images.json"
IMAGE_CONTAINER = "images.dat"
IMAGE_SOURCE_DIR = "images"


async def reprocess_object(record: ObjectRecord, compiler: ImageCompiler) -> ObjectRecord:
    """
    Compile one object's raw image list and rewrite its manifest.

    Steps run strictly in order: write ``images.json``, build
    ``images.dat``, read the container's entry count, rewrite ``images``
    to ``$LGX:images.dat[0..<count-1>]``, save ``object.json``, then delete
    ``images.json`` and the ``images/`` source directory.

    Parameters:
        record: Object with a raw ``images`` list
        compiler: Image compiler used for build and details

    Returns:
        The same record, mutated in place

    Raises:
        ToolNotFound: If the compiler is missing
        ToolFailed: If the compiler exits with a non-zero code
        ManifestIntrospectionFailed: If the entry count cannot be read
    """
    LOGGER.info(f"Reprocessing {record.label}", extra={"object_id": record.label})
    cwd = record.owning_directory

    await write_json(cwd / IMAGE_MANIFEST, record.images)
    await compiler.build(cwd, IMAGE_MANIFEST, IMAGE_CONTAINER)
    entry_count = await compiler.entry_count(cwd, IMAGE_CONTAINER)

    record.images = str(CompiledReference.for_entry_count(IMAGE_CONTAINER, entry_count))
    await save_object(record, cwd / OBJECT_MANIFEST)

    await remove_path(cwd / IMAGE_MANIFEST)
    await remove_path(cwd / IMAGE_SOURCE_DIR)
    return record


async def reprocess_objects(
    records: Iterable[ObjectRecord],
    compiler: ImageCompiler,
    *,
    parallel: bool = False,
) -> list[ObjectRecord]:
    """
    Reprocess every record whose ``images`` value is a raw list.

    Records with absent or already compiled images are skipped, which makes
    a second run over compiled output a no-op.

    Returns:
        The records that went through the compiler
    """
    pending = [record for record in records if needs_reprocessing(record.images)]

    async def handle(record: ObjectRecord) -> None:
        await reprocess_object(record, compiler)

    return await fan_out(pending, handle, parallel=parallel)
