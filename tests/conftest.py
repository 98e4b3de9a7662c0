import shutil
import sys

import pytest

from grader.settings import Settings

HAS_GXX = shutil.which("g++") is not None


@pytest.fixture
def temp_root(tmp_path):
    p = tmp_path / "sbx"
    p.mkdir()
    return p


@pytest.fixture
def settings(tmp_path, temp_root):
    return Settings(
        temp_root=temp_root,
        compile_timeout_s=30,
        exec_timeout_s=5,
        python_bin=sys.executable,
        database_url=f"sqlite:///{tmp_path / 'grader.db'}",
    )


@pytest.fixture
def fast_settings(settings):
    # short execution deadline for timeout tests
    return settings.model_copy(update={"exec_timeout_s": 1})
