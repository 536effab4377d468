"""
Database models package
"""
from app.models.quiz_type import QuizType
from app.models.quiz import Quiz
from app.models.quiz_content import QuizContent, DIFFICULTY_LEVELS
from app.models.student_marks import StudentMarks
from app.models.book import Subject, Book, Chapter
from app.models.user_stats import UserStats

__all__ = [
    "QuizType",
    "Quiz",
    "QuizContent",
    "DIFFICULTY_LEVELS",
    "StudentMarks",
    "Subject",
    "Book",
    "Chapter",
    "UserStats",
]
