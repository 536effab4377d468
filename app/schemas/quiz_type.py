"""
Pydantic schemas for the quiz type catalog
"""
from pydantic import BaseModel, Field
from typing import List
from uuid import UUID


class QuizTypeCreate(BaseModel):
    type_name: str = Field(..., min_length=1, max_length=100, description="Display name, e.g. MCQ")


class QuizTypeResponse(BaseModel):
    type_id: UUID
    type_name: str
    order: int

    class Config:
        from_attributes = True


class QuizTypeListResponse(BaseModel):
    quiz_types: List[QuizTypeResponse]


class QuizTypeCreateResponse(BaseModel):
    message: str
    quiz_type: QuizTypeResponse
