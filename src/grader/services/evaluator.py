from __future__ import annotations
from typing import Sequence

import structlog

from ..core.errors import SandboxIOError
from ..core.models import ErrorKind, EvaluationOutcome, TestCase
from ..core.utils import make_executable, new_eval_id
from ..runners.base import LanguageSpec
from ..sandbox.process import ProcessSandbox
from ..sandbox.workspace import EvaluationWorkspace
from ..settings import Settings
from .scorer import run_test_cases

log = structlog.get_logger(__name__)


class Evaluator:
    """
    Shared engine for every LanguageSpec entry: write source, compile if the
    entry has a compile step, then hand the run command to the test runner.
    Always returns an EvaluationOutcome.
    """

    def __init__(self, settings: Settings, sandbox: ProcessSandbox | None = None):
        self.s = settings
        self.sandbox = sandbox or ProcessSandbox()

    def evaluate(self, code: str, lang: LanguageSpec, test_cases: Sequence[TestCase]) -> EvaluationOutcome:
        eval_id = new_eval_id()
        blog = log.bind(eval_id=eval_id, language=lang.name, tests=len(test_cases))
        blog.info("evaluation_started")
        try:
            with EvaluationWorkspace(self.s.temp_root) as ws:
                outcome = self._evaluate_in(ws, code, lang, test_cases)
        except (SandboxIOError, OSError) as e:
            blog.error("evaluation_io_error", error=str(e))
            return EvaluationOutcome.failure(f"Error: {e}", SandboxIOError.kind)

        blog.info(
            "evaluation_finished",
            success=outcome.success,
            error=outcome.error.value if outcome.error else None,
            passed=outcome.passed_tests,
        )
        return outcome

    def _evaluate_in(
        self,
        ws: EvaluationWorkspace,
        code: str,
        lang: LanguageSpec,
        test_cases: Sequence[TestCase],
    ) -> EvaluationOutcome:
        source = ws.write_source(code, lang.extension)
        artifact = ws.artifact_path()

        if lang.needs_compile:
            res = self.sandbox.run(
                lang.compile_command(source, artifact),
                timeout_s=self.s.compile_timeout_s,
                cwd=ws.path,
                env=lang.env,
            )
            if res.timed_out:
                return EvaluationOutcome.failure("Compilation time limit exceeded", ErrorKind.COMPILE_TIMEOUT)
            if res.rc != 0:
                log.info("compile_failed", language=lang.name, rc=res.rc)
                return EvaluationOutcome.failure(f"Compilation error: {res.stderr}", ErrorKind.COMPILE_ERROR)
            make_executable(artifact)

        return run_test_cases(
            self.sandbox,
            lang.run_command(source, artifact),
            test_cases,
            timeout_s=self.s.exec_timeout_s,
            cwd=ws.path,
            env=lang.env,
        )
