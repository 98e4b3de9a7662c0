from typing import List, Optional

from .base import ARTIFACT, SOURCE, LanguageSpec


def cpp_language(cxx_bin: str = "g++", flags: Optional[List[str]] = None) -> LanguageSpec:
    return LanguageSpec(
        name="cpp",
        extension=".cpp",
        compile_argv=[cxx_bin, *(flags or []), SOURCE, "-o", ARTIFACT],
        run_argv=[ARTIFACT],
    )
