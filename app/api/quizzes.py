"""
Quiz generation and management API endpoints
"""

from fastapi import APIRouter, Depends, File, Header, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.config import settings
from app.database import get_db
from app.exceptions import ValidationError
from app.schemas.quiz import (
    PrivacyToggleResponse,
    QuizChaptersResponse,
    QuizDeleteResponse,
    QuizDetailResponse,
    QuizGenerateRequest,
    QuizGenerateResponse,
    QuizListResponse,
    QuizSummary,
    TemplateResponse,
)
from app.services.quiz_orchestrator import GenerationStage, QuizDraftOrchestrator
from app.services.quiz_service import QuizService
from app.services.template_service import TemplateAssembler
from app.utils.rate_limiter import rate_limiter


router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.post(
    "/generate",
    response_model=QuizGenerateResponse,
    status_code=201,
    dependencies=[Depends(rate_limiter)],
)
async def generate_quiz(
    request: QuizGenerateRequest,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """
    Generate an authored quiz from chapter documents

    - One generation call per requested quiz type, in request order
    - Any failure removes the quiz entirely
    - Subject derived from the books' subjects ("Mixed" if several)
    """
    logger.info(
        f"Generating quiz '{request.quiz_name}' for user {user_id}: "
        f"{len(request.chapter_list)} document(s), {len(request.quiz_types)} type(s)"
    )

    stages = [
        GenerationStage(
            type_id=entry.type_id,
            easy=entry.easy_questions_count,
            medium=entry.medium_questions_count,
            hard=entry.hard_questions_count,
        )
        for entry in request.quiz_types
    ]

    quiz = await QuizDraftOrchestrator(db).create_authored_quiz(
        quiz_name=request.quiz_name,
        description=request.description,
        is_private=request.is_private,
        document_urls=request.chapter_list,
        stages=stages,
        user_id=user_id,
        book_ids=request.book_list,
    )

    return QuizGenerateResponse(message="Quiz generated successfully", quiz_id=quiz.quiz_id)


@router.post(
    "/quick",
    response_model=QuizGenerateResponse,
    status_code=201,
    dependencies=[Depends(rate_limiter)],
)
async def quick_quiz(
    chapter_files: List[UploadFile] = File(...),
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """
    Generate a private single-use quiz from uploaded chapter files

    - MCQ (5/3/2) and Descriptive (3/2/1) questions
    - A failing type is skipped
    - Uploaded files are deleted afterwards
    """
    files = []
    for upload in chapter_files:
        content = await upload.read()
        if len(content) > settings.MAX_UPLOAD_SIZE_BYTES:
            raise ValidationError(f"File {upload.filename} exceeds the upload size limit")
        files.append((upload.filename or "chapter.pdf", content))

    quiz = await QuizDraftOrchestrator(db).create_quick_quiz(user_id, files)

    return QuizGenerateResponse(
        message="Quiz generated successfully and chapters deleted",
        quiz_id=quiz.quiz_id,
    )


@router.get("", response_model=QuizListResponse)
async def list_quizzes(
    search: Optional[str] = None,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """The caller's quizzes and other users' public quizzes"""
    quizzes = QuizService(db).list_quizzes(user_id, search)

    return QuizListResponse(
        user_quizzes=[QuizSummary.model_validate(q) for q in quizzes["user_quizzes"]],
        public_quizzes=[QuizSummary.model_validate(q) for q in quizzes["public_quizzes"]],
    )


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(
    quiz_id: UUID,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """Single quiz; private quizzes are visible to their owner only"""
    quiz = QuizService(db).get_quiz_for_user(quiz_id, user_id)

    return QuizDetailResponse(
        allow=True,
        message="Quiz details retrieved successfully",
        quiz=QuizSummary.model_validate(quiz),
    )


@router.get("/{quiz_id}/chapters", response_model=QuizChaptersResponse)
async def get_quiz_chapters(quiz_id: UUID, db: Session = Depends(get_db)):
    """Catalog chapters the quiz was generated from"""
    details = QuizService(db).chapter_details(quiz_id)
    return QuizChaptersResponse(quiz_id=quiz_id, chapter_details=details)


@router.post("/{quiz_id}/toggle-privacy", response_model=PrivacyToggleResponse)
async def toggle_quiz_privacy(
    quiz_id: UUID,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """Flip a quiz between private and public (owner only)"""
    quiz = QuizService(db).toggle_privacy(quiz_id, user_id)

    return PrivacyToggleResponse(
        message=f"Your quiz is now {'Private' if quiz.is_private else 'Public'}",
        is_private=quiz.is_private,
    )


@router.delete("/{quiz_id}", response_model=QuizDeleteResponse)
async def delete_quiz(
    quiz_id: UUID,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """Delete a quiz with all its content (owner only)"""
    deleted = QuizService(db).delete_quiz(quiz_id, user_id)
    return QuizDeleteResponse(message="Quiz deleted successfully", deleted_quiz_contents=deleted)


@router.get("/{quiz_id}/template", response_model=TemplateResponse)
async def get_template(
    quiz_id: UUID,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db),
):
    """
    Authoring view of the quiz (owner only)

    Includes answers and explanations, grouped by quiz type name.
    """
    QuizService(db).get_owned_quiz(quiz_id, user_id, action="view the answers of")
    template = TemplateAssembler(db).authoring_view(quiz_id)
    return TemplateResponse(template=template)
