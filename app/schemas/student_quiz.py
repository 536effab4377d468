"""
Pydantic schemas for quiz submission and grading
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Any, Literal, Optional


class SubmittedAnswer(BaseModel):
    """One answered question"""
    question: str = Field(..., min_length=1, description="Question prompt as served")
    difficulty: Literal["easy", "medium", "hard"]
    user_answer: Any = None


class QuizSubmission(BaseModel):
    """Answers partitioned by quiz type name"""
    model_config = ConfigDict(populate_by_name=True)

    mcq: List[SubmittedAnswer] = Field(default_factory=list, alias="MCQ")
    descriptive: List[SubmittedAnswer] = Field(default_factory=list, alias="Descriptive")
    numerical: List[SubmittedAnswer] = Field(default_factory=list, alias="Numerical")

    @model_validator(mode="after")
    def check_not_empty(self):
        if not (self.mcq or self.descriptive or self.numerical):
            raise ValueError("At least one answer is required")
        return self


class GradedAnswer(BaseModel):
    """Grading details for a single question"""
    question: str
    user_answer: Any = None
    correct_answer: Any = None
    difficulty: str
    score: float
    feedback: Optional[str] = None


class QuizGradingResponse(BaseModel):
    """Response after quiz grading"""
    mcq: List[GradedAnswer]
    descriptive: List[GradedAnswer]
    numerical: List[GradedAnswer]
    mcq_score: float
    mcq_percentage: float
    mcq_total_marks: float
    descriptive_score: float
    descriptive_percentage: float
    descriptive_total_marks: float
    numerical_score: float
    numerical_percentage: float
    numerical_total_marks: float
    total_score: float
    total_percentage: float
    total_marks: float
    grade: str
