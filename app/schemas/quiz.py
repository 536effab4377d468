"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Dict, Any, Optional
from uuid import UUID
from datetime import datetime


class QuizTypeEntry(BaseModel):
    """Requested question counts for one quiz type"""
    type_id: UUID
    easy_questions_count: int = Field(0, ge=0, le=50, description="Number of easy questions")
    medium_questions_count: int = Field(0, ge=0, le=50, description="Number of medium questions")
    hard_questions_count: int = Field(0, ge=0, le=50, description="Number of hard questions")

    @model_validator(mode="after")
    def check_any_questions(self):
        if self.easy_questions_count + self.medium_questions_count + self.hard_questions_count == 0:
            raise ValueError("At least one question must be requested per quiz type")
        return self


class QuizGenerateRequest(BaseModel):
    """Request schema for authored quiz generation"""
    quiz_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    is_private: bool = False
    chapter_list: List[str] = Field(default_factory=list, description="Source document URLs")
    book_list: List[UUID] = Field(default_factory=list, description="Books the chapters belong to")
    quiz_types: List[QuizTypeEntry] = Field(..., min_length=1)

    @field_validator("quiz_types")
    @classmethod
    def check_unique_types(cls, value: List[QuizTypeEntry]) -> List[QuizTypeEntry]:
        type_ids = [entry.type_id for entry in value]
        if len(set(type_ids)) != len(type_ids):
            raise ValueError("Each quiz type may only be requested once")
        return value


class QuizGenerateResponse(BaseModel):
    message: str
    quiz_id: UUID


class QuizSummary(BaseModel):
    """Quiz header as returned by listing and detail endpoints"""
    quiz_id: UUID
    quiz_name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    document_urls: List[str] = []
    is_private: bool
    quick_quiz: bool
    created_by: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuizListResponse(BaseModel):
    user_quizzes: List[QuizSummary]
    public_quizzes: List[QuizSummary]


class QuizDetailResponse(BaseModel):
    allow: bool = True
    message: str
    quiz: QuizSummary


class PrivacyToggleResponse(BaseModel):
    message: str
    is_private: bool


class QuizDeleteResponse(BaseModel):
    message: str
    deleted_quiz_contents: int


class ChapterDetail(BaseModel):
    chapter_name: str
    description: Optional[str] = None
    chapter_url: str


class QuizChaptersResponse(BaseModel):
    quiz_id: UUID
    chapter_details: List[ChapterDetail]


class TemplateResponse(BaseModel):
    """Questions grouped by type name: [{"MCQ": [...]}, {"Descriptive": [...]}]"""
    template: List[Dict[str, List[Dict[str, Any]]]]
