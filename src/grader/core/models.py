from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class RunStatus(str, Enum):
    FINISHED = "FINISHED"
    TIMED_OUT = "TIMED_OUT"


class ErrorKind(str, Enum):
    COMPILE_ERROR = "COMPILE_ERROR"
    COMPILE_TIMEOUT = "COMPILE_TIMEOUT"
    EXECUTION_TIMEOUT = "EXECUTION_TIMEOUT"
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
    SANDBOX_IO_ERROR = "SANDBOX_IO_ERROR"


@dataclass(frozen=True)
class TestCase:
    input: str
    expected_output: str
    is_example: bool = False  # informational only

    __test__ = False  # not a pytest class


@dataclass(frozen=True)
class SandboxResult:
    status: RunStatus
    rc: Optional[int]
    stdout: str
    stderr: str
    duration_s: float

    @property
    def timed_out(self) -> bool:
        return self.status == RunStatus.TIMED_OUT


@dataclass(frozen=True)
class EvaluationOutcome:
    success: bool
    report: str
    total_tests: Optional[int] = None
    passed_tests: Optional[int] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, report: str, error: ErrorKind) -> "EvaluationOutcome":
        return cls(success=False, report=report, error=error)


@dataclass(frozen=True)
class Submission:
    code: str
    language: str
    report: str
    score: int
    submitted_at: datetime
    user_id: int
    problem_id: int
    id: Optional[int] = None
