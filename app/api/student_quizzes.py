"""
Student-facing quiz endpoints: answer-free template and submission
"""
from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from app.database import get_db
from app.schemas.quiz import TemplateResponse
from app.schemas.student_quiz import GradedAnswer, QuizGradingResponse, QuizSubmission
from app.services.grading_service import GradingService, QuestionCategory
from app.services.quiz_service import QuizService
from app.services.template_service import TemplateAssembler
from app.utils.rate_limiter import rate_limiter

router = APIRouter(prefix="/api/student/quizzes", tags=["student-quizzes"])
logger = logging.getLogger(__name__)


@router.get("/{quiz_id}", response_model=TemplateResponse)
async def get_student_quiz(
    quiz_id: UUID,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db)
):
    """Questions to answer, grouped by quiz type name; no answers or explanations"""
    QuizService(db).get_quiz_for_user(quiz_id, user_id)
    template = TemplateAssembler(db).student_view(quiz_id)
    return TemplateResponse(template=template)


@router.post(
    "/{quiz_id}/submit",
    response_model=QuizGradingResponse,
    dependencies=[Depends(rate_limiter)],
)
async def submit_quiz(
    quiz_id: UUID,
    submission: QuizSubmission,
    user_id: UUID = Header(..., alias="user-id"),
    db: Session = Depends(get_db)
):
    """
    Submit and grade a quiz

    Grading strategy:
    - MCQ: Exact match, 1/3/5 points for easy/medium/hard
    - Descriptive, Numerical: feedback service score scaled to 3/5/10

    Resubmitting overwrites the stored marks.
    """
    QuizService(db).get_quiz_for_user(quiz_id, user_id)

    logger.info(
        f"Grading quiz {quiz_id} for user {user_id}: "
        f"{len(submission.mcq)} MCQ, {len(submission.descriptive)} descriptive, "
        f"{len(submission.numerical)} numerical"
    )

    result = await GradingService(db).grade_submission(
        quiz_id,
        user_id,
        {
            QuestionCategory.MCQ: submission.mcq,
            QuestionCategory.DESCRIPTIVE: submission.descriptive,
            QuestionCategory.NUMERICAL: submission.numerical,
        },
    )

    for category in ("mcq", "descriptive", "numerical"):
        result[category] = [GradedAnswer(**item) for item in result[category]]

    return QuizGradingResponse(**result)
