"""
Quiz grading service with difficulty-weighted scoring
MCQ: Exact match, weights easy=1 / medium=3 / hard=5
Descriptive/Numerical: 0-100 score from the feedback service, rescaled to
easy=3 / medium=5 / hard=10
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import DependencyFailure, NotFound, QuestionNotFound
from app.models import QuizContent, StudentMarks
from app.services.llm_client import LLMServiceClient, llm_client
from app.services.quiz_service import QuizService
from app.services.quiz_type_catalog import QuizTypeCatalog

logger = logging.getLogger(__name__)


class QuestionCategory(str, Enum):
    MCQ = "MCQ"
    DESCRIPTIVE = "Descriptive"
    NUMERICAL = "Numerical"


MCQ_WEIGHTS = {"easy": 1, "medium": 3, "hard": 5}
JUDGED_MAX_SCORES = {"easy": 3, "medium": 5, "hard": 10}

# question_type discriminator expected by the feedback service
FEEDBACK_QUESTION_TYPES = {
    QuestionCategory.DESCRIPTIVE: 1,
    QuestionCategory.NUMERICAL: 2,
}

GRADE_THRESHOLDS = (
    (90, "O"),
    (80, "A+"),
    (70, "A"),
    (60, "B+"),
    (50, "B"),
    (40, "C"),
    (30, "D"),
)


def assign_grade(total_percentage: float) -> str:
    """Letter grade; every threshold must be strictly exceeded"""
    for threshold, grade in GRADE_THRESHOLDS:
        if total_percentage > threshold:
            return grade
    return "F"


def percentage(achieved: float, attainable: float) -> float:
    return (achieved / attainable * 100) if attainable > 0 else 0.0


def find_question(content: Optional[QuizContent], difficulty: str, prompt: str) -> Optional[Dict[str, Any]]:
    """Stored question with this exact prompt in the given difficulty bucket"""
    if content is None:
        return None
    for question in content.bucket(difficulty):
        if question.get("question") == prompt:
            return question
    return None


@dataclass
class CategoryResult:
    """Running totals for one question category"""
    items: List[Dict[str, Any]] = field(default_factory=list)
    score: float = 0.0
    total_marks: float = 0.0

    def add(self, item: Dict[str, Any], score: float, max_score: float) -> None:
        self.items.append(item)
        self.score += score
        self.total_marks += max_score

    @property
    def percentage(self) -> float:
        return percentage(self.score, self.total_marks)


class GradingService:
    """
    Service for grading quiz submissions

    Nothing is persisted unless every answer has been scored.
    """

    def __init__(self, db: Session, client: Optional[LLMServiceClient] = None):
        self.db = db
        self.client = client or llm_client
        self.catalog = QuizTypeCatalog(db)

    async def grade_submission(
        self,
        quiz_id: UUID,
        user_id: UUID,
        answers: Dict[QuestionCategory, List[Any]],
    ) -> Dict[str, Any]:
        """
        Grade a complete quiz submission and store the marks

        Args:
            quiz_id: Quiz UUID
            user_id: Student UUID
            answers: Submitted answers per category; each entry has
                question, difficulty and user_answer attributes

        Returns:
            Per-question breakdown plus category and total scores and grade

        Raises:
            NotFound: quiz or its content missing
            QuestionNotFound: an MCQ answer does not match stored content
            DependencyFailure: the feedback service failed
        """
        QuizService(self.db).get_completed_quiz(quiz_id)

        contents = self._load_contents(quiz_id)
        if not any(contents.values()):
            raise NotFound("Quiz content not found")

        mcq = self._grade_mcq(contents[QuestionCategory.MCQ], answers.get(QuestionCategory.MCQ) or [])

        descriptive = await self._grade_judged(
            QuestionCategory.DESCRIPTIVE,
            contents[QuestionCategory.DESCRIPTIVE],
            answers.get(QuestionCategory.DESCRIPTIVE) or [],
        )
        numerical = await self._grade_judged(
            QuestionCategory.NUMERICAL,
            contents[QuestionCategory.NUMERICAL],
            answers.get(QuestionCategory.NUMERICAL) or [],
        )

        total_score = mcq.score + descriptive.score + numerical.score
        total_marks = mcq.total_marks + descriptive.total_marks + numerical.total_marks
        total_percentage = percentage(total_score, total_marks)
        grade = assign_grade(total_percentage)

        self._save_marks(
            user_id,
            quiz_id,
            mcq_percentage=mcq.percentage,
            descriptive_percentage=descriptive.percentage,
            numerical_percentage=numerical.percentage,
            total_percentage=total_percentage,
            grade=grade,
        )

        logger.info(
            f"Quiz {quiz_id} graded for user {user_id}: "
            f"{total_score:.2f}/{total_marks:.2f} ({total_percentage:.2f}%), grade {grade}"
        )

        return {
            "mcq": mcq.items,
            "descriptive": descriptive.items,
            "numerical": numerical.items,
            "mcq_score": mcq.score,
            "mcq_percentage": mcq.percentage,
            "mcq_total_marks": mcq.total_marks,
            "descriptive_score": descriptive.score,
            "descriptive_percentage": descriptive.percentage,
            "descriptive_total_marks": descriptive.total_marks,
            "numerical_score": numerical.score,
            "numerical_percentage": numerical.percentage,
            "numerical_total_marks": numerical.total_marks,
            "total_score": total_score,
            "total_percentage": total_percentage,
            "total_marks": total_marks,
            "grade": grade,
        }

    def _load_contents(self, quiz_id: UUID) -> Dict[QuestionCategory, Optional[QuizContent]]:
        contents = {}
        for category in QuestionCategory:
            quiz_type = self.catalog.find_by_name(category.value)
            content = None
            if quiz_type is not None:
                content = (
                    self.db.query(QuizContent)
                    .filter(QuizContent.quiz_id == quiz_id, QuizContent.type_id == quiz_type.type_id)
                    .first()
                )
            contents[category] = content
        return contents

    def _grade_mcq(self, content: Optional[QuizContent], answers: List[Any]) -> CategoryResult:
        """Exact-match grading; an unknown question aborts the submission"""
        result = CategoryResult()

        for answer in answers:
            stored = find_question(content, answer.difficulty, answer.question)
            if stored is None:
                raise QuestionNotFound("Question not found in quiz content")

            weight = MCQ_WEIGHTS[answer.difficulty]
            correct_answer = stored.get("answer")
            score = weight if correct_answer == answer.user_answer else 0

            result.add(
                {
                    "question": answer.question,
                    "user_answer": answer.user_answer,
                    "correct_answer": correct_answer,
                    "difficulty": answer.difficulty,
                    "score": score,
                },
                score,
                weight,
            )

        return result

    async def _grade_judged(
        self,
        category: QuestionCategory,
        content: Optional[QuizContent],
        answers: List[Any],
    ) -> CategoryResult:
        """Descriptive/numerical grading through the feedback service, one answer at a time"""
        result = CategoryResult()

        for answer in answers:
            stored = find_question(content, answer.difficulty, answer.question)
            correct_answer = stored.get("answer") if stored else None

            llm_score, feedback = await self._request_feedback(category, answer, correct_answer)

            max_score = JUDGED_MAX_SCORES[answer.difficulty]
            score = max_score * llm_score / 100

            result.add(
                {
                    "question": answer.question,
                    "user_answer": answer.user_answer,
                    "correct_answer": correct_answer,
                    "feedback": feedback,
                    "difficulty": answer.difficulty,
                    "score": score,
                },
                score,
                max_score,
            )

        return result

    async def _request_feedback(
        self,
        category: QuestionCategory,
        answer: Any,
        correct_answer: Optional[str],
    ) -> Tuple[float, str]:
        # Descriptive answers are judged on the rubric alone
        if category is QuestionCategory.NUMERICAL and correct_answer is not None:
            reference = str(correct_answer)
        else:
            reference = ""

        payload = {
            "question": answer.question,
            "correct_answer": reference,
            "user_answer": answer.user_answer,
            "question_type": FEEDBACK_QUESTION_TYPES[category],
            "difficulty": answer.difficulty,
        }

        try:
            response = await self.client.feedback(payload)
        except DependencyFailure as e:
            logger.error(f"Error contacting feedback service: {e.message}")
            raise DependencyFailure(f"Error evaluating {category.value.lower()} questions") from e

        try:
            llm_score = float(response["score"])
        except (KeyError, TypeError, ValueError) as e:
            raise DependencyFailure(
                f"Error evaluating {category.value.lower()} questions: invalid feedback response"
            ) from e

        if not math.isfinite(llm_score):
            raise DependencyFailure(
                f"Error evaluating {category.value.lower()} questions: invalid feedback response"
            )

        llm_score = max(0.0, min(100.0, llm_score))
        return llm_score, response.get("feedback", "")

    def _save_marks(self, user_id: UUID, quiz_id: UUID, **values) -> StudentMarks:
        """Insert or overwrite the marks for (user, quiz); last write wins"""
        marks = self._find_marks(user_id, quiz_id)
        if marks is None:
            marks = StudentMarks(user_id=user_id, quiz_id=quiz_id, **values)
            self.db.add(marks)
            try:
                self.db.commit()
                return marks
            except IntegrityError:
                # a concurrent submission inserted first
                self.db.rollback()
                marks = self._find_marks(user_id, quiz_id)

        for name, value in values.items():
            setattr(marks, name, value)
        self.db.commit()
        return marks

    def _find_marks(self, user_id: UUID, quiz_id: UUID) -> Optional[StudentMarks]:
        return (
            self.db.query(StudentMarks)
            .filter(StudentMarks.user_id == user_id, StudentMarks.quiz_id == quiz_id)
            .first()
        )
