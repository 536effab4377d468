"""
StudentMarks model - latest graded result per student and quiz
"""
from sqlalchemy import Column, String, Float, TIMESTAMP, ForeignKey, UniqueConstraint, Uuid, func
from app.database import Base
import uuid


class StudentMarks(Base):
    """
    Student marks table - one row per (user, quiz), overwritten on resubmission
    """
    __tablename__ = "student_marks"
    __table_args__ = (
        UniqueConstraint("user_id", "quiz_id", name="uq_student_marks_user_quiz"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    quiz_id = Column(Uuid, ForeignKey("quizzes.quiz_id", ondelete="CASCADE"), nullable=False)
    mcq_percentage = Column(Float, nullable=False)
    descriptive_percentage = Column(Float, nullable=False)
    numerical_percentage = Column(Float, nullable=False)
    total_percentage = Column(Float, nullable=False)
    grade = Column(String(2), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StudentMarks(user_id={self.user_id}, quiz_id={self.quiz_id}, grade={self.grade})>"
