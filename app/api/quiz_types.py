"""
Quiz type catalog API endpoints
"""
from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from app.database import get_db
from app.exceptions import NotFound
from app.schemas.quiz_type import (
    QuizTypeCreate,
    QuizTypeCreateResponse,
    QuizTypeListResponse,
    QuizTypeResponse,
)
from app.services.quiz_type_catalog import QuizTypeCatalog

router = APIRouter(prefix="/api/quiz-types", tags=["quiz-types"])
logger = logging.getLogger(__name__)


@router.get("", response_model=QuizTypeListResponse)
async def list_quiz_types(db: Session = Depends(get_db)):
    """List quiz types in display order"""
    quiz_types = QuizTypeCatalog(db).list_types()
    if not quiz_types:
        raise NotFound("No quiz types found")

    return QuizTypeListResponse(
        quiz_types=[QuizTypeResponse.model_validate(t) for t in quiz_types]
    )


@router.post("", response_model=QuizTypeCreateResponse, status_code=201)
async def add_quiz_type(
    request: QuizTypeCreate,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db)
):
    """
    Register a new quiz type

    - Type names are unique
    - New types are appended after the current last display order
    """
    quiz_type = QuizTypeCatalog(db).add_type(request.type_name, created_by=user_id)

    return QuizTypeCreateResponse(
        message="Quiz type added successfully",
        quiz_type=QuizTypeResponse.model_validate(quiz_type)
    )
