"""
Pydantic schemas for usage statistics
"""
from pydantic import BaseModel
from uuid import UUID


class UserStatsResponse(BaseModel):
    """Quiz and book counters of a user"""
    user_id: UUID
    total_quizzes: int
    public_quizzes: int
    private_quizzes: int
    normal_quizzes: int
    quick_quizzes: int
    total_books: int
    public_books: int
    private_books: int
