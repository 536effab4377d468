"""
Quiz draft orchestrator
Creates a quiz, generates its content type by type and finalizes or rolls back

Flow:
1. Insert the quiz with is_completed=False so content can reference quiz_id
2. Run one generation stage per requested type, strictly in order
3. Mark the quiz complete, or apply the failure policy of the quiz kind
4. Refresh the owner's usage stats
"""
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    EmptyDocumentSet,
    GenerationFailed,
    QuizConflict,
    QuizServiceError,
    ValidationError,
)
from app.models import Book, Quiz, QuizContent, Subject
from app.services.content_generation import ContentGenerationAdapter, content_generator
from app.services.document_storage import DocumentStorage, document_storage
from app.services.quiz_type_catalog import QuizTypeCatalog
from app.services.stats_service import StatsService, stats_service

logger = logging.getLogger(__name__)

QUICK_QUIZ_SUBJECT = "Quick Quiz"
MIXED_SUBJECT = "Mixed"
QUICK_QUIZ_DESCRIPTION = "This is a quick quiz"


class FailurePolicy(str, Enum):
    """What a failed generation stage does to the quiz"""
    ROLLBACK = "rollback"  # delete the quiz, report GenerationFailed
    SKIP = "skip"  # log, drop that type, keep going


def failure_policy_for(quick_quiz: bool) -> FailurePolicy:
    return FailurePolicy.SKIP if quick_quiz else FailurePolicy.ROLLBACK


@dataclass
class GenerationStage:
    """One question type to generate; identified by id or, for defaults, by name"""
    easy: int
    medium: int
    hard: int
    type_id: Optional[UUID] = None
    type_name: Optional[str] = None

    def label(self) -> str:
        return str(self.type_id or self.type_name)


QUICK_QUIZ_STAGES: Tuple[GenerationStage, ...] = (
    GenerationStage(type_name="MCQ", easy=5, medium=3, hard=2),
    GenerationStage(type_name="Descriptive", easy=3, medium=2, hard=1),
)


def derive_subject(labels: Iterable[str], quick: bool = False) -> Optional[str]:
    """
    Subject label of a quiz from the subjects of its source books

    - quick quiz -> "Quick Quiz"
    - one distinct label -> that label
    - several distinct labels -> "Mixed"
    - no labels -> None
    """
    if quick:
        return QUICK_QUIZ_SUBJECT

    unique = {label for label in labels if label}
    if len(unique) == 1:
        return next(iter(unique))
    if len(unique) > 1:
        return MIXED_SUBJECT
    return None


def generate_quick_quiz_name() -> str:
    return f"Quiz_{uuid.uuid4().hex[:5]}"


class QuizDraftOrchestrator:
    """Drives quiz creation for authored and quick quizzes"""

    def __init__(
        self,
        db: Session,
        generator: Optional[ContentGenerationAdapter] = None,
        storage: Optional[DocumentStorage] = None,
        stats: Optional[StatsService] = None,
    ):
        self.db = db
        self.catalog = QuizTypeCatalog(db)
        self.generator = generator or content_generator
        self.storage = storage or document_storage
        self.stats = stats or stats_service

    def subject_for_books(self, book_ids: Sequence[UUID]) -> Optional[str]:
        if not book_ids:
            return None

        rows = (
            self.db.query(Subject.subject_name)
            .join(Book, Book.subject_id == Subject.id)
            .filter(Book.book_id.in_(list(book_ids)))
            .all()
        )
        return derive_subject(row[0] for row in rows)

    async def create_authored_quiz(
        self,
        quiz_name: str,
        description: Optional[str],
        is_private: bool,
        document_urls: List[str],
        stages: List[GenerationStage],
        user_id: UUID,
        book_ids: Optional[Sequence[UUID]] = None,
    ) -> Quiz:
        """
        Create a quiz from chosen documents and type configuration

        Any failing stage deletes the quiz and its content.

        Raises:
            EmptyDocumentSet: no source documents
            QuizConflict: quiz identifier already taken
            GenerationFailed: a stage failed; nothing was kept
        """
        if not document_urls:
            raise EmptyDocumentSet()
        if not stages:
            raise ValidationError("At least one quiz type is required")

        quiz = self._insert_draft(
            quiz_name=quiz_name,
            description=description,
            document_urls=list(document_urls),
            is_private=is_private,
            quick_quiz=False,
            created_by=user_id,
            subject=self.subject_for_books(book_ids or []),
        )

        await self._generate(quiz, stages, failure_policy_for(quick_quiz=False))
        self.stats.refresh_user_stats(self.db, user_id)
        return quiz

    async def create_quick_quiz(self, user_id: UUID, files: List[Tuple[str, bytes]]) -> Quiz:
        """
        Create a single-use quiz from uploaded files with default type counts

        Uploaded files are removed once generation is over.

        Raises:
            EmptyDocumentSet: no files
            ValidationError: too many files
            GenerationFailed: no type could be generated
        """
        if not files:
            raise EmptyDocumentSet("At least one chapter file is required")
        if len(files) > settings.QUICK_QUIZ_MAX_FILES:
            raise ValidationError(
                f"You cannot upload more than {settings.QUICK_QUIZ_MAX_FILES} files at a time"
            )

        document_urls: List[str] = []
        try:
            for filename, content in files:
                document_urls.append(await self.storage.upload(filename, content))

            quiz = self._insert_draft(
                quiz_name=generate_quick_quiz_name(),
                description=QUICK_QUIZ_DESCRIPTION,
                document_urls=document_urls,
                is_private=True,
                quick_quiz=True,
                created_by=user_id,
                subject=derive_subject([], quick=True),
            )

            await self._generate(quiz, list(QUICK_QUIZ_STAGES), failure_policy_for(quick_quiz=True))
        finally:
            for url in document_urls:
                await self.storage.delete(url)

        self.stats.refresh_user_stats(self.db, user_id)
        return quiz

    def _insert_draft(self, **fields) -> Quiz:
        quiz_id = uuid.uuid4()
        quiz = Quiz(quiz_id=quiz_id, is_completed=False, **fields)
        self.db.add(quiz)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise QuizConflict(f"Quiz identifier {quiz_id} already exists") from e

        self.db.refresh(quiz)
        logger.info(f"Draft quiz saved: {quiz_id} ({quiz.quiz_name})")
        return quiz

    async def _generate(self, quiz: Quiz, stages: List[GenerationStage], policy: FailurePolicy) -> None:
        """
        Run the stages and mark the quiz complete

        Any error, including a failed commit, deletes the quiz and its content.
        """
        # the session may be unusable after a failed flush; never read `quiz` there
        quiz_id = quiz.quiz_id

        try:
            generated = await self._run_pipeline(quiz, quiz_id, stages, policy)
            if generated == 0:
                raise GenerationFailed("No question type could be generated")
            self._finalize(quiz, quiz_id)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error generating quiz {quiz_id}: {str(e)}")
            self._rollback(quiz_id)
            if isinstance(e, GenerationFailed):
                raise
            raise GenerationFailed(f"Failed to generate quiz: {getattr(e, 'message', str(e))}") from e

    async def _run_pipeline(
        self,
        quiz: Quiz,
        quiz_id: UUID,
        stages: List[GenerationStage],
        policy: FailurePolicy,
    ) -> int:
        """Run stages one after another; returns how many produced content"""
        generated = 0

        for stage in stages:
            try:
                await self._run_stage(quiz, quiz_id, stage)
                generated += 1
            except (QuizServiceError, SQLAlchemyError) as e:
                if policy is FailurePolicy.ROLLBACK:
                    raise
                self.db.rollback()
                logger.warning(f"Skipping quiz type {stage.label()} for quiz {quiz_id}: {str(e)}")

        return generated

    async def _run_stage(self, quiz: Quiz, quiz_id: UUID, stage: GenerationStage) -> QuizContent:
        if stage.type_id is not None:
            quiz_type = self.catalog.resolve_by_id(stage.type_id)
        else:
            quiz_type = self.catalog.resolve_by_name(stage.type_name)
        type_name = quiz_type.type_name

        buckets = await self.generator.generate(
            document_urls=quiz.document_urls,
            type_name=type_name,
            easy=stage.easy,
            medium=stage.medium,
            hard=stage.hard,
            folder_name=quiz.quiz_name,
            user_id=quiz.created_by,
        )

        content = QuizContent.from_buckets(quiz_id, quiz_type.type_id, buckets)
        counts = (content.easy_count, content.medium_count, content.hard_count)
        self.db.add(content)
        self.db.commit()

        logger.info(
            f"Saved {type_name} content for quiz {quiz_id} "
            f"(easy={counts[0]}, medium={counts[1]}, hard={counts[2]})"
        )
        return content

    def _finalize(self, quiz: Quiz, quiz_id: UUID) -> None:
        quiz.is_completed = True
        self.db.commit()
        self.db.refresh(quiz)
        logger.info(f"Quiz completed: {quiz_id}")

    def _rollback(self, quiz_id: UUID) -> None:
        """Delete a draft quiz and its content by identifier; errors are logged only"""
        try:
            self.db.query(QuizContent).filter(
                QuizContent.quiz_id == quiz_id
            ).delete(synchronize_session=False)
            self.db.query(Quiz).filter(
                Quiz.quiz_id == quiz_id
            ).delete(synchronize_session=False)
            self.db.commit()
            logger.info(f"Removed failed quiz: {quiz_id}")
        except SQLAlchemyError as e:
            logger.error(f"Error removing failed quiz {quiz_id}: {str(e)}")
            self.db.rollback()
