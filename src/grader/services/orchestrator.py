from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Optional, Protocol

import structlog

from ..core.errors import ProblemNotFound, UnsupportedLanguageError
from ..core.models import Submission, TestCase
from ..runners.registry import LanguageRegistry, UnsupportedLanguage
from .evaluator import Evaluator
from .scorer import compute_score

log = structlog.get_logger(__name__)


class ProblemSource(Protocol):
    def get_test_cases(self, problem_id: int) -> Optional[List[TestCase]]: ...


class SubmissionSink(Protocol):
    def add(self, submission: Submission) -> Submission: ...


class SubmissionOrchestrator:
    """
    Ties problem/user identity to the evaluator and to persistence:
    load test cases -> dispatch -> evaluate -> score -> store.
    """

    def __init__(
        self,
        problems: ProblemSource,
        submissions: SubmissionSink,
        registry: LanguageRegistry,
        evaluator: Evaluator,
    ):
        self.problems = problems
        self.submissions = submissions
        self.registry = registry
        self.evaluator = evaluator

    def submit(self, problem_id: int, user_id: int, code: str, language: str) -> Submission:
        test_cases = self.problems.get_test_cases(problem_id)
        if test_cases is None:
            raise ProblemNotFound(problem_id)

        lang = self.registry.dispatch(language)
        if isinstance(lang, UnsupportedLanguage):
            log.info("unsupported_language", language=language, problem_id=problem_id, user_id=user_id)
            raise UnsupportedLanguageError(lang.language)

        outcome = self.evaluator.evaluate(code, lang, test_cases)
        submission = Submission(
            code=code,
            language=language,
            report=outcome.report,
            score=compute_score(outcome),
            submitted_at=datetime.now(timezone.utc),
            user_id=user_id,
            problem_id=problem_id,
        )
        saved = self.submissions.add(submission)
        log.info(
            "submission_created",
            submission_id=saved.id,
            problem_id=problem_id,
            user_id=user_id,
            score=saved.score,
        )
        return saved
