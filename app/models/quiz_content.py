"""
QuizContent model - generated questions per (quiz, type)
"""
from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship
from app.database import Base, JSONType

DIFFICULTY_LEVELS = ("easy", "medium", "hard")


class QuizContent(Base):
    """
    Quiz contents table - generated questions bucketed by difficulty

    generated_questions = {"easy": [...], "medium": [...], "hard": [...]}
    """
    __tablename__ = "quiz_contents"
    __table_args__ = (
        UniqueConstraint("quiz_id", "type_id", name="uq_quiz_content_quiz_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(
        Uuid,
        ForeignKey("quizzes.quiz_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type_id = Column(Uuid, nullable=False)
    easy_count = Column(Integer, nullable=False, default=0)
    medium_count = Column(Integer, nullable=False, default=0)
    hard_count = Column(Integer, nullable=False, default=0)
    generated_questions = Column(JSONType, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    quiz = relationship("Quiz", back_populates="contents")

    @classmethod
    def from_buckets(cls, quiz_id, type_id, buckets):
        """Build a content row whose counts match its question lists"""
        questions = {level: list(buckets.get(level, [])) for level in DIFFICULTY_LEVELS}
        return cls(
            quiz_id=quiz_id,
            type_id=type_id,
            easy_count=len(questions["easy"]),
            medium_count=len(questions["medium"]),
            hard_count=len(questions["hard"]),
            generated_questions=questions,
        )

    def bucket(self, difficulty: str) -> list:
        return (self.generated_questions or {}).get(difficulty) or []

    def __repr__(self):
        return (
            f"<QuizContent(quiz_id={self.quiz_id}, type_id={self.type_id}, "
            f"easy={self.easy_count}, medium={self.medium_count}, hard={self.hard_count})>"
        )
