"""
Parkpack CLI

Compiles object image lists, packages every object directory into a
``.parkobj`` archive and bundles the rest into ``objects.zip``.

Options:
- --parallel: Reprocess and package objects concurrently
- --verbose: Log tool invocations and file operations
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any

import typer

from parkpack.pipeline import PipelineOptions, run_pipeline

app = typer.Typer(add_completion=False, help="Object packaging pipeline")


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        # Include any custom attributes passed via `extra=`.
        reserved = {
            "name","msg","args","levelname","levelno","pathname","filename","module",
            "exc_info","exc_text","stack_info","lineno","funcName","created","msecs",
            "relativeCreated","thread","threadName","processName","process","taskName",
        }
        for k, v in record.__dict__.items():
            if k in reserved or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str) -> logging.Logger:
    logger = logging.getLogger("parkpack")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("parkpack")


@app.command()
def build(
    parallel: bool = typer.Option(
        False, "--parallel", help="Reprocess and package objects concurrently"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log tool invocations and file operations"
    ),
) -> None:
    """
    Stage ./objects into ./artifacts and package it.

    Example:
        parkpack --parallel --verbose
    """
    global LOGGER
    options = PipelineOptions(parallel=parallel, verbose=verbose)
    LOGGER = setup_logging("DEBUG" if options.verbose else "INFO")

    try:
        asyncio.run(run_pipeline(options))
    except Exception as e:
        LOGGER.debug("pipeline_failed", exc_info=True)
        typer.echo(str(e))
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
