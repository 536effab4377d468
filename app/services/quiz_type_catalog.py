"""
QuizType catalog - single place to resolve question types
"""
import logging
import uuid
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import TypeNotFound, ValidationError
from app.models import QuizType

logger = logging.getLogger(__name__)


def _as_uuid(value: Union[str, UUID]) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        return None


class QuizTypeCatalog:
    """Lookups and administration for the quiz type registry"""

    def __init__(self, db: Session):
        self.db = db

    def list_types(self) -> List[QuizType]:
        """All quiz types in display order"""
        return self.db.query(QuizType).order_by(QuizType.order).all()

    def resolve_by_id(self, type_id: Union[str, UUID]) -> QuizType:
        """
        Resolve a type by its external identifier

        Raises:
            TypeNotFound: no type with this identifier
        """
        parsed = _as_uuid(type_id)
        quiz_type = None
        if parsed is not None:
            quiz_type = self.db.query(QuizType).filter(QuizType.type_id == parsed).first()

        if quiz_type is None:
            raise TypeNotFound(f"Quiz type with ID {type_id} not found.")
        return quiz_type

    def resolve_by_name(self, type_name: str) -> QuizType:
        """
        Resolve a type by its display name (exact match)

        Raises:
            TypeNotFound: no type with this name
        """
        quiz_type = self.db.query(QuizType).filter(QuizType.type_name == type_name).first()
        if quiz_type is None:
            raise TypeNotFound(f"Quiz type '{type_name}' not found.")
        return quiz_type

    def find_by_name(self, type_name: str) -> Optional[QuizType]:
        try:
            return self.resolve_by_name(type_name)
        except TypeNotFound:
            return None

    def add_type(self, type_name: str, created_by: Optional[UUID] = None) -> QuizType:
        """
        Register a new quiz type at the end of the display order

        Raises:
            ValidationError: a type with this name already exists
        """
        if self.find_by_name(type_name) is not None:
            raise ValidationError("Quiz type already exists")

        max_order = self.db.query(func.max(QuizType.order)).scalar()
        new_order = 0 if max_order is None else max_order + 1

        quiz_type = QuizType(
            type_id=uuid.uuid4(),
            type_name=type_name,
            order=new_order,
            created_by=created_by,
        )
        self.db.add(quiz_type)
        self.db.commit()
        self.db.refresh(quiz_type)

        logger.info(f"Quiz type added: {quiz_type.type_name} (order {quiz_type.order})")
        return quiz_type
