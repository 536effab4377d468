"""
QuizType model - catalog of question types
"""
from sqlalchemy import Column, String, Integer, TIMESTAMP, Uuid, func
from app.database import Base
import uuid


class QuizType(Base):
    """
    Quiz types table - ordered registry of question categories (MCQ, Descriptive, ...)
    """
    __tablename__ = "quiz_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type_id = Column(Uuid, unique=True, nullable=False, index=True, default=uuid.uuid4)
    type_name = Column(String(100), unique=True, nullable=False)
    order = Column("sort_order", Integer, unique=True, nullable=False)
    created_by = Column(Uuid)
    created_at = Column(TIMESTAMP, server_default=func.now())

    def __repr__(self):
        return f"<QuizType(type_id={self.type_id}, name={self.type_name}, order={self.order})>"
