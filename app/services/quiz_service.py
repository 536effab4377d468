"""
Quiz retrieval and ownership operations
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.exceptions import Forbidden, NotFound
from app.models import Chapter, Quiz, QuizContent
from app.services.stats_service import stats_service
from app.utils.cache import cache_service

logger = logging.getLogger(__name__)


class QuizService:
    """Read paths only ever see completed quizzes"""

    def __init__(self, db: Session):
        self.db = db

    def get_completed_quiz(self, quiz_id: UUID) -> Quiz:
        """
        Raises:
            NotFound: quiz missing or still being generated
        """
        quiz = (
            self.db.query(Quiz)
            .filter(Quiz.quiz_id == quiz_id, Quiz.is_completed.is_(True))
            .first()
        )
        if not quiz:
            raise NotFound("Quiz not found")
        return quiz

    def get_quiz_for_user(self, quiz_id: UUID, user_id: UUID) -> Quiz:
        """
        Raises:
            NotFound: quiz missing or incomplete
            Forbidden: private quiz of another user
        """
        quiz = self.get_completed_quiz(quiz_id)
        if quiz.is_private and quiz.created_by != user_id:
            raise Forbidden("You are not authorized to view this quiz")
        return quiz

    def get_owned_quiz(self, quiz_id: UUID, user_id: UUID, action: str = "modify") -> Quiz:
        quiz = self.db.query(Quiz).filter(Quiz.quiz_id == quiz_id).first()
        if not quiz:
            raise NotFound("Quiz not found")
        if quiz.created_by != user_id:
            raise Forbidden(f"You are not authorized to {action} this quiz")
        return quiz

    def list_quizzes(self, user_id: UUID, search: Optional[str] = None) -> Dict[str, List[Quiz]]:
        """
        The user's own completed quizzes plus other users' public ones

        `search` is matched case-insensitively against name and description.
        """
        base = self.db.query(Quiz).filter(Quiz.is_completed.is_(True))
        if search:
            pattern = f"%{search}%"
            base = base.filter(
                or_(Quiz.quiz_name.ilike(pattern), Quiz.description.ilike(pattern))
            )

        user_quizzes = (
            base.filter(Quiz.created_by == user_id).order_by(Quiz.created_at.desc()).all()
        )
        public_quizzes = (
            base.filter(Quiz.is_private.is_(False), Quiz.created_by != user_id)
            .order_by(Quiz.created_at.desc())
            .all()
        )
        return {"user_quizzes": user_quizzes, "public_quizzes": public_quizzes}

    def toggle_privacy(self, quiz_id: UUID, user_id: UUID) -> Quiz:
        quiz = self.get_owned_quiz(quiz_id, user_id)
        quiz.is_private = not quiz.is_private
        self.db.commit()
        self.db.refresh(quiz)

        logger.info(f"Quiz {quiz_id} is now {'private' if quiz.is_private else 'public'}")
        stats_service.refresh_user_stats(self.db, user_id)
        return quiz

    def delete_quiz(self, quiz_id: UUID, user_id: UUID) -> int:
        """
        Delete a quiz and its content

        Returns:
            Number of content records removed
        """
        quiz = self.get_owned_quiz(quiz_id, user_id, action="delete")

        deleted_contents = (
            self.db.query(QuizContent)
            .filter(QuizContent.quiz_id == quiz_id)
            .delete(synchronize_session=False)
        )
        self.db.delete(quiz)
        self.db.commit()

        cache_service.invalidate_quiz(str(quiz_id))
        logger.info(f"Quiz deleted: {quiz_id} ({deleted_contents} content records)")

        stats_service.refresh_user_stats(self.db, user_id)
        return deleted_contents

    def chapter_details(self, quiz_id: UUID) -> List[Dict[str, Any]]:
        """Catalog chapters behind the quiz's documents; unknown URLs are skipped"""
        quiz = self.get_completed_quiz(quiz_id)

        details = []
        for url in quiz.document_urls or []:
            chapter = self.db.query(Chapter).filter(Chapter.chapter_url == url).first()
            if chapter:
                details.append({
                    "chapter_name": chapter.chapter_name,
                    "description": chapter.description,
                    "chapter_url": chapter.chapter_url,
                })
        return details
