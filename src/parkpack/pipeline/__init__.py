"""
Pipeline stages for object packaging.

Provides the reprocessing and packaging stages and the runner that
sequences them, with a barrier between each stage.
"""

from .coordinator import fan_out
from .reprocess import reprocess_object, reprocess_objects
from .packaging import package_object, package_objects, package_remaining
from .runner import PipelineOptions, run_pipeline, stage_tree

__all__ = [
    "fan_out",
    "reprocess_object",
    "reprocess_objects",
    "package_object",
    "package_objects",
    "package_remaining",
    "PipelineOptions",
    "run_pipeline",
    "stage_tree",
]
