from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import List

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ---- sandbox ----
    temp_root: Path = Path(tempfile.gettempdir())
    compile_timeout_s: float = 5
    exec_timeout_s: float = 5

    # ---- toolchains ----
    python_bin: str = sys.executable or "python3"
    cxx_bin: str = "g++"
    cxx_flags: List[str] = []

    # ---- outer collaborators ----
    database_url: str = "sqlite:///./grader.db"
    log_level: str = "INFO"

    # env prefix GRADER_*
    model_config = SettingsConfigDict(env_prefix="GRADER_", extra="ignore")


def load_settings() -> Settings:
    # 0) base from env GRADER_*
    s = Settings()

    # 1) conf/grader.yaml (or GRADER_CONF)
    conf_yaml = os.environ.get("GRADER_CONF", "conf/grader.yaml")
    try:
        with open(conf_yaml, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        data = {}
    except yaml.YAMLError:
        # broken config file -> keep env/defaults
        data = {}
    if not isinstance(data, dict):
        data = {}

    sandbox = data.get("sandbox") or {}
    if not isinstance(sandbox, dict):
        sandbox = {}

    toolchains = data.get("toolchains") or {}
    if not isinstance(toolchains, dict):
        toolchains = {}

    # 2) merge, keeping the field types
    s = s.model_copy(
        update={
            "temp_root": Path(str(sandbox.get("temp_root", s.temp_root))),
            "compile_timeout_s": float(sandbox.get("compile_timeout_s", s.compile_timeout_s)),
            "exec_timeout_s": float(sandbox.get("exec_timeout_s", s.exec_timeout_s)),
            "python_bin": str(toolchains.get("python", s.python_bin)),
            "cxx_bin": str(toolchains.get("cxx", s.cxx_bin)),
            "cxx_flags": [str(x) for x in (toolchains.get("cxx_flags") or s.cxx_flags)],
            "database_url": str(data.get("database_url", s.database_url)),
            "log_level": str(data.get("log_level", s.log_level)),
        }
    )
    return s
