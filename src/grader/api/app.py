from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..core.errors import ProblemNotFound, UnsupportedLanguageError
from ..core.models import Submission
from ..logging import setup_logging
from ..runners.registry import LanguageRegistry
from ..services.evaluator import Evaluator
from ..services.orchestrator import SubmissionOrchestrator
from ..services.store import ProblemStore, SubmissionStore, make_session_factory
from ..settings import Settings, load_settings


# --------- Schemas ---------
class NewSubmissionReq(BaseModel):
    problem_id: int
    user_id: int
    code: str
    language: str


class SubmissionRes(BaseModel):
    id: Optional[int] = None
    code: str
    language: str
    report: str
    score: int
    submitted_at: datetime
    user_id: int
    problem_id: int


class LanguagesRes(BaseModel):
    languages: List[str]


def _res(sub: Submission) -> SubmissionRes:
    return SubmissionRes(
        id=sub.id,
        code=sub.code,
        language=sub.language,
        report=sub.report,
        score=sub.score,
        submitted_at=sub.submitted_at,
        user_id=sub.user_id,
        problem_id=sub.problem_id,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Run with: uvicorn grader.api.app:create_app --factory"""
    s = settings or load_settings()
    setup_logging(s.log_level)

    sessions = make_session_factory(s.database_url)
    problems = ProblemStore(sessions)
    submissions = SubmissionStore(sessions)
    registry = LanguageRegistry.from_settings(s)
    orc = SubmissionOrchestrator(problems, submissions, registry, Evaluator(s))

    app = FastAPI(title="Grader API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.problems = problems
    app.state.submissions = submissions

    # --------- Endpoints ---------

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/api/languages", response_model=LanguagesRes)
    def languages():
        return LanguagesRes(languages=registry.supported())

    # sync handler: evaluation blocks, FastAPI runs it in the threadpool
    @app.post("/api/submission/submit", response_model=SubmissionRes, status_code=201)
    def submit(req: NewSubmissionReq):
        try:
            sub = orc.submit(req.problem_id, req.user_id, req.code, req.language)
        except ProblemNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except UnsupportedLanguageError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _res(sub)

    @app.get("/api/submission/all/problem/{problem_id}", response_model=List[SubmissionRes])
    def by_problem(problem_id: int):
        return [_res(x) for x in submissions.by_problem(problem_id)]

    @app.get("/api/submission/all/user/{user_id}", response_model=List[SubmissionRes])
    def by_user(user_id: int):
        return [_res(x) for x in submissions.by_user(user_id)]

    @app.get("/api/submission/all/{user_id}/{problem_id}", response_model=List[SubmissionRes])
    def by_user_and_problem(user_id: int, problem_id: int):
        return [_res(x) for x in submissions.by_user_and_problem(user_id, problem_id)]

    @app.get("/api/submission/{submission_id}", response_model=SubmissionRes)
    def get_submission(submission_id: int):
        sub = submissions.get(submission_id)
        if sub is None:
            raise HTTPException(status_code=404, detail="submission_not_found")
        return _res(sub)

    return app
