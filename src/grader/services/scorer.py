from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog

from ..core.models import ErrorKind, EvaluationOutcome, TestCase
from ..sandbox.process import ProcessSandbox

log = structlog.get_logger(__name__)

TIME_LIMIT_EXCEEDED = "Time limit exceeded"


def run_test_cases(
    sandbox: ProcessSandbox,
    cmd: List[str],
    test_cases: Sequence[TestCase],
    timeout_s: float,
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
) -> EvaluationOutcome:
    """
    Run `cmd` once per test case, in order, and build the report.

    Any timeout aborts the whole run: the remaining cases are skipped and the
    lines collected so far are dropped.
    """
    lines: List[str] = []
    passed = 0

    for index, case in enumerate(test_cases):
        res = sandbox.run(cmd, stdin=case.input + "\n", timeout_s=timeout_s, cwd=cwd, env=env)
        if res.timed_out:
            log.info("test_case_timeout", index=index, timeout_s=timeout_s)
            return EvaluationOutcome.failure(TIME_LIMIT_EXCEEDED, ErrorKind.EXECUTION_TIMEOUT)

        if res.stdout.strip() == case.expected_output.strip():
            lines.append(f"Test case {index}: pass\n")
            passed += 1
        else:
            lines.append(f"Test case {index}: failed\n")

    total = len(test_cases)
    lines.append(f"Test case count: {passed}/{total}\n")
    return EvaluationOutcome(success=True, report="".join(lines), total_tests=total, passed_tests=passed)


def compute_score(outcome: EvaluationOutcome) -> int:
    total, passed = outcome.total_tests, outcome.passed_tests
    if not total or passed is None:
        return 0
    return (100 * passed) // total
