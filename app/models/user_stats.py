"""
UserStats model - usage counters per user
"""
from sqlalchemy import Column, Integer, TIMESTAMP, Uuid, func
from app.database import Base
import uuid


class UserStats(Base):
    """
    User stats table - quiz and book counters, recomputed after quiz writes
    """
    __tablename__ = "user_stats"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, unique=True, nullable=False, index=True)
    total_quizzes = Column(Integer, nullable=False, default=0)
    public_quizzes = Column(Integer, nullable=False, default=0)
    private_quizzes = Column(Integer, nullable=False, default=0)
    normal_quizzes = Column(Integer, nullable=False, default=0)
    quick_quizzes = Column(Integer, nullable=False, default=0)
    total_books = Column(Integer, nullable=False, default=0)
    public_books = Column(Integer, nullable=False, default=0)
    private_books = Column(Integer, nullable=False, default=0)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<UserStats(user_id={self.user_id}, total_quizzes={self.total_quizzes})>"
