"""
Child process invocation for the external tools.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from parkpack.errors import ToolFailed, ToolNotFound

LOGGER = logging.getLogger(__name__)


async def run_process(name: str, args: Sequence[str], cwd: Path | str | None = None) -> str:
    """
    Run an executable and return its combined stdout/stderr.

    Both streams feed one buffer, so their relative order is not
    guaranteed. There is no timeout: a hung child hangs the caller.

    Parameters:
        name: Executable name, resolved on PATH
        args: Arguments passed to the executable
        cwd: Working directory for the child process

    Returns:
        Captured output, decoded as UTF-8

    Raises:
        ToolNotFound: If the executable cannot be found
        ToolFailed: If the process exits with a non-zero code

    Example:
        >>> out = await run_process("gxc", ["details", "images.dat"], cwd="artifacts/foo")
    """
    LOGGER.debug(
        f'Launching "{name} {" ".join(args)}" in "{cwd}"',
        extra={"tool": name, "args": list(args), "cwd": str(cwd) if cwd is not None else None},
    )
    try:
        proc = await asyncio.create_subprocess_exec(
            name,
            *args,
            cwd=str(cwd) if cwd is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError as e:
        raise ToolNotFound(name) from e

    stdout, _ = await proc.communicate()
    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    if proc.returncode != 0:
        raise ToolFailed(name, output)
    return output
