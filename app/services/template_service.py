"""
Template assembler - quiz content grouped by question type name

Two views of the same content:
- authoring: question, difficulty, answer, explanation (+ options)
- student: question, difficulty (+ options); answers never leave the server
"""
import logging
from collections import OrderedDict
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFound
from app.models import DIFFICULTY_LEVELS, QuizContent
from app.services.quiz_service import QuizService
from app.services.quiz_type_catalog import QuizTypeCatalog
from app.utils.cache import CacheService, cache_service

logger = logging.getLogger(__name__)

AUTHORING_VIEW = "authoring"
STUDENT_VIEW = "student"


def question_view(question: Dict[str, Any], difficulty: str, include_answers: bool) -> Dict[str, Any]:
    item = {
        "question": question.get("question"),
        "difficulty": difficulty,
    }
    if include_answers:
        item["answer"] = question.get("answer")
        item["explanation"] = question.get("explanation")
    if question.get("options"):
        item["options"] = question["options"]
    return item


class TemplateAssembler:
    """Builds the per-type question lists served to authors and students"""

    def __init__(self, db: Session, cache: CacheService = None):
        self.db = db
        self.catalog = QuizTypeCatalog(db)
        self.cache = cache or cache_service

    def authoring_view(self, quiz_id: UUID) -> List[Dict[str, List[Dict[str, Any]]]]:
        return self._view(quiz_id, AUTHORING_VIEW)

    def student_view(self, quiz_id: UUID) -> List[Dict[str, List[Dict[str, Any]]]]:
        return self._view(quiz_id, STUDENT_VIEW)

    def _view(self, quiz_id: UUID, view: str) -> List[Dict[str, List[Dict[str, Any]]]]:
        QuizService(self.db).get_completed_quiz(quiz_id)

        cached = self.cache.get_template(str(quiz_id), view)
        if cached is not None:
            return cached

        template = self.assemble(quiz_id, include_answers=(view == AUTHORING_VIEW))
        self.cache.set_template(str(quiz_id), view, template)
        return template

    def assemble(self, quiz_id: UUID, include_answers: bool) -> List[Dict[str, List[Dict[str, Any]]]]:
        """
        Flatten content into [{type_name: [question, ...]}, ...]

        Questions run easy, medium, hard within a type; types follow catalog order.

        Raises:
            NotFound: the quiz has no content
            TypeNotFound: content references a type missing from the catalog
        """
        contents = (
            self.db.query(QuizContent)
            .filter(QuizContent.quiz_id == quiz_id)
            .order_by(QuizContent.id)
            .all()
        )
        if not contents:
            raise NotFound("No quiz content found for the given quizId")

        by_type: "OrderedDict[UUID, List[Dict[str, Any]]]" = OrderedDict()
        for content in contents:
            questions = [
                question_view(question, level, include_answers)
                for level in DIFFICULTY_LEVELS
                for question in content.bucket(level)
            ]
            if questions:
                by_type.setdefault(content.type_id, []).extend(questions)

        groups = []
        for type_id, questions in by_type.items():
            quiz_type = self.catalog.resolve_by_id(type_id)
            groups.append((quiz_type.order, quiz_type.type_name, questions))

        groups.sort(key=lambda group: group[0])

        logger.info(
            f"Assembled {'authoring' if include_answers else 'student'} template for quiz {quiz_id}: "
            f"{', '.join(name for _, name, _ in groups)}"
        )
        return [{name: questions} for _, name, questions in groups]
