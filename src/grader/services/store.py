from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import sessionmaker
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ..core.models import Submission, TestCase


class TestCaseRow(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    problem_id: int = Field(index=True)
    input: str
    output: str
    example: bool = False


class SubmissionRow(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str
    language: str
    report: str
    score: int
    submitted_at: datetime
    user_id: int = Field(index=True)
    problem_id: int = Field(index=True)


def make_session_factory(url: str = "sqlite:///./grader.db") -> sessionmaker:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, connect_args=connect_args)
    SQLModel.metadata.create_all(engine)
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def _to_submission(row: SubmissionRow) -> Submission:
    return Submission(
        id=row.id,
        code=row.code,
        language=row.language,
        report=row.report,
        score=row.score,
        submitted_at=row.submitted_at,
        user_id=row.user_id,
        problem_id=row.problem_id,
    )


class ProblemStore:
    """Read side of problems as seen by the grader: the ordered test cases."""

    def __init__(self, session_factory: sessionmaker):
        self.SessionLocal = session_factory

    def add_test_case(self, problem_id: int, input: str, output: str, example: bool = False) -> int:
        with self.SessionLocal() as s:
            row = TestCaseRow(problem_id=problem_id, input=input, output=output, example=example)
            s.add(row)
            s.commit()
            return row.id

    def get_test_cases(self, problem_id: int) -> Optional[List[TestCase]]:
        with self.SessionLocal() as s:
            rows = s.exec(
                select(TestCaseRow).where(TestCaseRow.problem_id == problem_id).order_by(TestCaseRow.id)
            ).all()
        if not rows:
            return None
        return [TestCase(input=r.input, expected_output=r.output, is_example=r.example) for r in rows]


class SubmissionStore:
    def __init__(self, session_factory: sessionmaker):
        self.SessionLocal = session_factory

    def add(self, submission: Submission) -> Submission:
        row = SubmissionRow(
            code=submission.code,
            language=submission.language,
            report=submission.report,
            score=submission.score,
            submitted_at=submission.submitted_at,
            user_id=submission.user_id,
            problem_id=submission.problem_id,
        )
        with self.SessionLocal() as s:
            s.add(row)
            s.commit()
            return replace(submission, id=row.id)

    def get(self, submission_id: int) -> Optional[Submission]:
        with self.SessionLocal() as s:
            row = s.get(SubmissionRow, submission_id)
        return _to_submission(row) if row else None

    def by_user_and_problem(self, user_id: int, problem_id: int) -> List[Submission]:
        stmt = (
            select(SubmissionRow)
            .where(SubmissionRow.user_id == user_id, SubmissionRow.problem_id == problem_id)
            .order_by(SubmissionRow.id.desc())
        )
        return self._list(stmt)

    def by_problem(self, problem_id: int) -> List[Submission]:
        stmt = select(SubmissionRow).where(SubmissionRow.problem_id == problem_id).order_by(SubmissionRow.id.desc())
        return self._list(stmt)

    def by_user(self, user_id: int) -> List[Submission]:
        stmt = (
            select(SubmissionRow)
            .where(SubmissionRow.user_id == user_id)
            .order_by(SubmissionRow.submitted_at.desc(), SubmissionRow.id.desc())
        )
        return self._list(stmt)

    def _list(self, stmt) -> List[Submission]:
        with self.SessionLocal() as s:
            return [_to_submission(r) for r in s.exec(stmt).all()]
