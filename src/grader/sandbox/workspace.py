from __future__ import annotations
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from ..core.errors import SandboxIOError
from ..core.utils import executable_suffix

log = structlog.get_logger(__name__)


class EvaluationWorkspace:
    """
    Scratch directory for a single evaluation:
      <temp_root>/eval_XXXXXXXX/
        ├─ main<ext>       (submitted source)
        └─ main[.exe]      (compiled artifact, if any)

    Used as a context manager; the directory is removed on every exit path.
    """

    def __init__(self, temp_root: Path):
        self.temp_root = temp_root
        self.path: Optional[Path] = None

    def __enter__(self) -> "EvaluationWorkspace":
        try:
            self.temp_root.mkdir(parents=True, exist_ok=True)
            self.path = Path(tempfile.mkdtemp(prefix="eval_", dir=str(self.temp_root)))
        except OSError as e:
            raise SandboxIOError(f"cannot create workspace: {e}") from e
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def write_source(self, code: str, extension: str) -> Path:
        src = self._dir() / f"main{extension}"
        try:
            src.write_text(code, encoding="utf-8")
        except (OSError, UnicodeEncodeError) as e:
            raise SandboxIOError(f"cannot write source file: {e}") from e
        return src

    def artifact_path(self) -> Path:
        return self._dir() / f"main{executable_suffix()}"

    def cleanup(self) -> None:
        if self.path is None:
            return
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            # never changes the evaluation result
            log.warning("workspace_cleanup_failed", path=str(self.path), error=str(e))
        self.path = None

    def _dir(self) -> Path:
        if self.path is None:
            raise SandboxIOError("workspace is not open")
        return self.path
