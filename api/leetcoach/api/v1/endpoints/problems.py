"""
Problem endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional
from datetime import date
import logging

from leetcoach.core.database import get_session
from leetcoach.schemas.problem import ProblemCreateRequest, ProblemResponse, ProblemListResponse
from leetcoach.services.problem_service import create_problem, list_problems, delete_problem
from leetcoach.api.v1.endpoints.utils import local_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/problems", tags=["problems"])


@router.post("", response_model=ProblemResponse, status_code=status.HTTP_200_OK)
async def add_problem(
    request: ProblemCreateRequest,
    user_id: int,
    today: Optional[date] = None,
    session: Session = Depends(get_session)
):
    """
    Add a problem for the user.

    A problem with the same slug is updated in place. A new card (due today)
    is created only if the problem has none yet.
    """
    problem, _card = create_problem(
        session,
        user_id=user_id,
        url=request.url,
        title=request.title,
        difficulty=request.difficulty.value,
        tags=request.tags,
        today=local_today(today),
    )
    return ProblemResponse.model_validate(problem)


@router.get("", response_model=ProblemListResponse)
async def get_problems(
    user_id: int,
    session: Session = Depends(get_session)
):
    """List the user's problems with their cards, newest first."""
    problems = list_problems(session, user_id)
    return ProblemListResponse(
        problems=[ProblemResponse.model_validate(problem) for problem, _card in problems]
    )


@router.delete("/{problem_id}")
async def remove_problem(
    problem_id: int,
    user_id: int,
    session: Session = Depends(get_session)
):
    """Delete a problem together with its card and review history."""
    delete_problem(session, user_id, problem_id)
    return {"ok": True}
