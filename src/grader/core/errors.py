from __future__ import annotations

from .models import ErrorKind


class GraderError(Exception):
    pass


class SandboxIOError(GraderError):
    """Temp file handling or process spawn failed for reasons outside the submission."""

    kind = ErrorKind.SANDBOX_IO_ERROR


class UnsupportedLanguageError(GraderError):
    kind = ErrorKind.UNSUPPORTED_LANGUAGE

    def __init__(self, language: str):
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class ProblemNotFound(GraderError):
    def __init__(self, problem_id: int):
        super().__init__(f"Problem not found: {problem_id}")
        self.problem_id = problem_id
