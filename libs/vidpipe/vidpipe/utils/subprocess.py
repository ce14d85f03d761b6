"""Run external tools without blocking the event loop.

Commands run through `subprocess.run()` on a worker thread. The child gets no
stdin, so a tool that prompts (ffmpeg asking to overwrite) fails fast instead
of hanging the request.
"""

from __future__ import annotations

import asyncio
import subprocess
import time
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stderr_tail(self, max_lines: int = 20) -> str:
        lines = self.stderr.decode(errors="ignore").strip().splitlines()
        return "\n".join(lines[-max_lines:])


async def run_subprocess(args: Sequence[str], *, timeout_s: float | None = None) -> RunResult:
    """Run `args` to completion and capture its output.

    On timeout the child is killed before `subprocess.TimeoutExpired` reaches
    the caller.
    """
    argv = [str(a) for a in args]

    def _run() -> RunResult:
        started = time.monotonic()
        cp = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout_s,
        )
        return RunResult(
            returncode=int(cp.returncode),
            stdout=cp.stdout or b"",
            stderr=cp.stderr or b"",
            elapsed_s=time.monotonic() - started,
        )

    return await asyncio.to_thread(_run)
