from __future__ import annotations
import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from ..core.errors import SandboxIOError
from ..core.models import RunStatus, SandboxResult
from ..core.utils import is_windows

log = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_S = 5


class ProcessSandbox:
    """
    Supervises one external process per call: feed stdin, capture stdout/stderr,
    kill on wall-clock timeout.

    On POSIX the child gets its own session so a timeout kills the whole
    process group, not just the direct child.
    """

    def __init__(self, env: Optional[Dict[str, str]] = None):
        self.env = env

    def run(
        self,
        cmd: List[str],
        stdin: Optional[str] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> SandboxResult:
        extra = {**(self.env or {}), **(env or {})}
        start = time.monotonic()
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=str(cwd) if cwd else None,
                env={**os.environ, **extra} if extra else None,
                start_new_session=not is_windows(),
            )
        except OSError as e:
            raise SandboxIOError(f"cannot start {cmd[0]}: {e}") from e

        try:
            out, err = proc.communicate(input=stdin, timeout=timeout_s)
        except subprocess.TimeoutExpired:
            self._kill(proc)
            dur = time.monotonic() - start
            log.info("process_timeout", cmd=cmd[0], timeout_s=timeout_s, duration_s=round(dur, 3))
            return SandboxResult(status=RunStatus.TIMED_OUT, rc=None, stdout="", stderr="", duration_s=dur)
        except OSError as e:
            self._kill(proc)
            raise SandboxIOError(f"I/O with {cmd[0]} failed: {e}") from e

        dur = time.monotonic() - start
        return SandboxResult(
            status=RunStatus.FINISHED,
            rc=proc.returncode,
            stdout=out or "",
            stderr=err or "",
            duration_s=dur,
        )

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        if is_windows():
            proc.kill()
        else:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
        # reap, drain pipes; output after a kill is discarded
        try:
            proc.communicate(timeout=2)
        except subprocess.TimeoutExpired:
            log.warning("process_reap_timeout", pid=proc.pid)
            proc.wait()
