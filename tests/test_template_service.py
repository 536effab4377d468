"""
Tests for template assembly
"""
import uuid
from unittest.mock import MagicMock

import pytest

from conftest import OWNER_ID, make_question
from app.exceptions import NotFound, TypeNotFound
from app.models import Quiz, QuizContent
from app.services.template_service import TemplateAssembler, question_view


@pytest.fixture
def cache():
    cache = MagicMock()
    cache.get_template.return_value = None
    return cache


def type_names(template):
    return [next(iter(group)) for group in template]


class TestQuestionView:
    def test_student_view_drops_answer_and_explanation(self):
        item = question_view(make_question("Q", "A", "easy", options=["A", "B"]), "easy", False)
        assert item == {"question": "Q", "difficulty": "easy", "options": ["A", "B"]}

    def test_authoring_view_keeps_answer_and_explanation(self):
        item = question_view(make_question("Q", "A", "hard"), "hard", True)
        assert item == {"question": "Q", "difficulty": "hard", "answer": "A", "explanation": "Because."}


class TestTemplateAssembler:
    def test_authoring_view(self, db, seeded_quiz, cache):
        template = TemplateAssembler(db, cache=cache).authoring_view(seeded_quiz.quiz_id)

        assert type_names(template) == ["MCQ", "Descriptive", "Numerical"]
        mcq = template[0]["MCQ"]
        assert [q["difficulty"] for q in mcq] == ["easy", "easy", "medium"]
        assert all("answer" in q and "explanation" in q for group in template for qs in group.values() for q in qs)
        assert mcq[0]["options"] == ["3", "4", "5", "6"]

    def test_student_view_has_no_answers(self, db, seeded_quiz, cache):
        template = TemplateAssembler(db, cache=cache).student_view(seeded_quiz.quiz_id)

        for group in template:
            for questions in group.values():
                for question in questions:
                    assert "answer" not in question
                    assert "explanation" not in question
        assert "options" not in template[1]["Descriptive"][0]

    def test_types_follow_catalog_order(self, db, seeded_quiz, quiz_types, cache):
        quiz_types["MCQ"].order = 10
        db.commit()

        template = TemplateAssembler(db, cache=cache).student_view(seeded_quiz.quiz_id)

        assert type_names(template) == ["Descriptive", "Numerical", "MCQ"]

    def test_types_without_questions_are_omitted(self, db, quiz_types, cache):
        quiz = Quiz(quiz_id=uuid.uuid4(), quiz_name="Sparse", created_by=OWNER_ID, is_completed=True)
        db.add(quiz)
        db.commit()
        db.add(QuizContent.from_buckets(quiz.quiz_id, quiz_types["MCQ"].type_id, {}))
        db.add(QuizContent.from_buckets(quiz.quiz_id, quiz_types["Numerical"].type_id, {
            "medium": [make_question("5 x 5", "25", "medium")],
        }))
        db.commit()

        template = TemplateAssembler(db, cache=cache).authoring_view(quiz.quiz_id)

        assert type_names(template) == ["Numerical"]

    def test_missing_content(self, db, quiz_types, cache):
        quiz = Quiz(quiz_id=uuid.uuid4(), quiz_name="Empty", created_by=OWNER_ID, is_completed=True)
        db.add(quiz)
        db.commit()

        with pytest.raises(NotFound):
            TemplateAssembler(db, cache=cache).student_view(quiz.quiz_id)

    def test_incomplete_quiz(self, db, seeded_quiz, cache):
        seeded_quiz.is_completed = False
        db.commit()

        with pytest.raises(NotFound):
            TemplateAssembler(db, cache=cache).student_view(seeded_quiz.quiz_id)

    def test_unknown_type_in_content(self, db, seeded_quiz, quiz_types, cache):
        db.delete(quiz_types["Numerical"])
        db.commit()

        with pytest.raises(TypeNotFound):
            TemplateAssembler(db, cache=cache).authoring_view(seeded_quiz.quiz_id)

    def test_serves_cached_view(self, db, seeded_quiz, cache):
        cached = [{"MCQ": [{"question": "cached", "difficulty": "easy"}]}]
        cache.get_template.return_value = cached

        template = TemplateAssembler(db, cache=cache).student_view(seeded_quiz.quiz_id)

        assert template == cached
        cache.get_template.assert_called_once_with(str(seeded_quiz.quiz_id), "student")
        cache.set_template.assert_not_called()

    def test_caches_assembled_view(self, db, seeded_quiz, cache):
        template = TemplateAssembler(db, cache=cache).authoring_view(seeded_quiz.quiz_id)

        cache.set_template.assert_called_once_with(str(seeded_quiz.quiz_id), "authoring", template)
