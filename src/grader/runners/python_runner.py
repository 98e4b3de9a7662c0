from .base import SOURCE, LanguageSpec


def python_language(python_bin: str = "python3") -> LanguageSpec:
    return LanguageSpec(
        name="python",
        extension=".py",
        run_argv=[python_bin, SOURCE],
        env={"PYTHONUNBUFFERED": "1"},
    )
