"""
Usage statistics service - per-user quiz and book counters
"""
import logging
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.orm import Session

from app.models import Book, Quiz, UserStats

logger = logging.getLogger(__name__)


class StatsService:
    """Recomputes and reads the usage counters shown on a user's dashboard"""

    def compute_user_stats(self, db: Session, user_id: UUID) -> Dict[str, int]:
        """
        Count a user's quizzes and books

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            Dictionary of counters keyed like the UserStats columns
        """
        quizzes = db.query(Quiz).filter(Quiz.created_by == user_id).all()
        books = db.query(Book).filter(Book.owner_id == user_id).all()

        return {
            "total_quizzes": len(quizzes),
            "public_quizzes": sum(1 for q in quizzes if not q.is_private),
            "private_quizzes": sum(1 for q in quizzes if q.is_private),
            "normal_quizzes": sum(1 for q in quizzes if not q.quick_quiz),
            "quick_quizzes": sum(1 for q in quizzes if q.quick_quiz),
            "total_books": len(books),
            "public_books": sum(1 for b in books if not b.is_private),
            "private_books": sum(1 for b in books if b.is_private),
        }

    def refresh_user_stats(self, db: Session, user_id: UUID) -> None:
        """
        Upsert the user's counters

        Fire-and-forget: errors are logged and never reach the caller.
        """
        try:
            counters = self.compute_user_stats(db, user_id)

            stats = db.query(UserStats).filter(UserStats.user_id == user_id).first()
            if not stats:
                stats = UserStats(user_id=user_id)
                db.add(stats)

            for field, value in counters.items():
                setattr(stats, field, value)

            db.commit()
            logger.info(f"User stats refreshed for {user_id}: {counters['total_quizzes']} quizzes")

        except Exception as e:
            logger.error(f"Error updating user stats for {user_id}: {str(e)}")
            db.rollback()

    def get_user_stats(self, db: Session, user_id: UUID) -> Dict[str, Any]:
        """Stored counters, or freshly computed ones if none were stored yet"""
        stats = db.query(UserStats).filter(UserStats.user_id == user_id).first()
        if stats is None:
            counters = self.compute_user_stats(db, user_id)
        else:
            counters = {
                "total_quizzes": stats.total_quizzes,
                "public_quizzes": stats.public_quizzes,
                "private_quizzes": stats.private_quizzes,
                "normal_quizzes": stats.normal_quizzes,
                "quick_quizzes": stats.quick_quizzes,
                "total_books": stats.total_books,
                "public_books": stats.public_books,
                "private_books": stats.private_books,
            }
        return {"user_id": user_id, **counters}


# Global instance
stats_service = StatsService()
