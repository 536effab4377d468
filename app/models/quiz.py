"""
Quiz model - quiz header records
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, TIMESTAMP, Uuid, func
from sqlalchemy.orm import relationship
from app.database import Base, JSONType
import uuid


class Quiz(Base):
    """
    Quizzes table - one row per authored or quick quiz

    `id` is the storage key; `quiz_id` is the identifier handed out to clients.
    A quiz is inserted with is_completed=False and only flipped once its
    content has been generated.
    """
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(Uuid, unique=True, nullable=False, index=True, default=uuid.uuid4)
    quiz_name = Column(String(255), nullable=False)
    description = Column(Text)
    document_urls = Column(JSONType, nullable=False, default=list)
    is_private = Column(Boolean, nullable=False, default=False)
    quick_quiz = Column(Boolean, nullable=False, default=False)
    created_by = Column(Uuid, nullable=False, index=True)
    subject = Column(String(100))
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    contents = relationship(
        "QuizContent",
        back_populates="quiz",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Quiz(quiz_id={self.quiz_id}, name={self.quiz_name}, completed={self.is_completed})>"
