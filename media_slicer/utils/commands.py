"""Subprocess helpers."""

import asyncio
from pathlib import Path
from typing import Optional


async def run_cmd(
    *args: str,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = 30.0,
) -> tuple[int, str, str]:
    """Run a command and return (returncode, stdout, stderr).

    ``timeout=None`` waits for the process however long it takes.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd else None,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        return -1, "", "Command timed out"

    return (
        proc.returncode or 0,
        stdout.decode("utf-8", errors="replace").strip(),
        stderr.decode("utf-8", errors="replace").strip(),
    )
