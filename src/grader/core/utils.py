from __future__ import annotations
import os
import random
import stat
import string
import time
from pathlib import Path


def new_eval_id() -> str:
    suf = "".join(random.choice(string.hexdigits.lower()) for _ in range(6))
    return f"{int(time.time())}-{suf}"


def is_windows() -> bool:
    return os.name == "nt"


def executable_suffix() -> str:
    return ".exe" if is_windows() else ""


def make_executable(path: Path) -> None:
    # windows decides by suffix, nothing to set
    if is_windows():
        return
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
