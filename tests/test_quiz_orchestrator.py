"""
Tests for quiz creation: subject labels, sequential generation, rollback and skip policies
"""
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import OWNER_ID, make_question
from app.exceptions import (
    DependencyFailure,
    EmptyDocumentSet,
    GenerationFailed,
    MalformedResponse,
    ValidationError,
)
from app.models import Book, Quiz, QuizContent, Subject, UserStats
from app.services.quiz_orchestrator import (
    FailurePolicy,
    GenerationStage,
    QuizDraftOrchestrator,
    derive_subject,
    failure_policy_for,
)


class FakeGenerator:
    """Returns the requested number of questions; raises for configured type names"""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.calls = []

    async def generate(self, document_urls, type_name, easy, medium, hard, folder_name=None, user_id=None):
        self.calls.append(type_name)
        if type_name in self.failures:
            raise self.failures[type_name]
        counts = {"easy": easy, "medium": medium, "hard": hard}
        return {
            level: [make_question(f"{type_name} {level} {i}", "A", level) for i in range(count)]
            for level, count in counts.items()
        }


@pytest.fixture
def storage():
    storage = AsyncMock()
    storage.upload = AsyncMock(side_effect=lambda name, content: f"http://docs/{name}")
    storage.delete = AsyncMock(return_value=True)
    return storage


def stages_for(quiz_types, *names):
    return [
        GenerationStage(type_id=quiz_types[name].type_id, easy=2, medium=1, hard=1)
        for name in names
    ]


class TestDeriveSubject:
    """Subject label derivation"""

    def test_single_label(self):
        assert derive_subject(["Physics", "Physics", "Physics"]) == "Physics"

    def test_multiple_labels_are_mixed(self):
        assert derive_subject(["Physics", "Chemistry"]) == "Mixed"
        assert derive_subject(["Physics", "Chemistry", "Biology", "Physics"]) == "Mixed"

    def test_quick_quiz_label(self):
        assert derive_subject(["Physics"], quick=True) == "Quick Quiz"

    def test_no_labels(self):
        assert derive_subject([]) is None

    def test_subject_from_books(self, db):
        physics = Subject(subject_name="Physics")
        chemistry = Subject(subject_name="Chemistry")
        db.add_all([physics, chemistry])
        db.flush()
        books = [
            Book(book_id=uuid.uuid4(), name="Mechanics", subject_id=physics.id),
            Book(book_id=uuid.uuid4(), name="Optics", subject_id=physics.id),
            Book(book_id=uuid.uuid4(), name="Organic", subject_id=chemistry.id),
        ]
        db.add_all(books)
        db.commit()

        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator())

        assert orchestrator.subject_for_books([books[0].book_id, books[1].book_id]) == "Physics"
        assert orchestrator.subject_for_books([b.book_id for b in books]) == "Mixed"
        assert orchestrator.subject_for_books([]) is None


class TestFailurePolicy:
    def test_policy_by_quiz_kind(self):
        assert failure_policy_for(quick_quiz=False) is FailurePolicy.ROLLBACK
        assert failure_policy_for(quick_quiz=True) is FailurePolicy.SKIP


class TestAuthoredQuiz:
    """Authored quiz generation"""

    @pytest.mark.asyncio
    async def test_creates_completed_quiz_with_content(self, db, quiz_types):
        generator = FakeGenerator()
        orchestrator = QuizDraftOrchestrator(db, generator=generator)

        quiz = await orchestrator.create_authored_quiz(
            quiz_name="Kinematics",
            description="Chapter 2",
            is_private=False,
            document_urls=["http://docs/ch2.pdf"],
            stages=stages_for(quiz_types, "MCQ", "Numerical"),
            user_id=OWNER_ID,
        )

        assert quiz.is_completed is True
        assert quiz.quick_quiz is False
        assert generator.calls == ["MCQ", "Numerical"]

        contents = db.query(QuizContent).filter(QuizContent.quiz_id == quiz.quiz_id).all()
        assert len(contents) == 2
        for content in contents:
            assert content.easy_count == len(content.generated_questions["easy"]) == 2
            assert content.medium_count == len(content.generated_questions["medium"]) == 1
            assert content.hard_count == len(content.generated_questions["hard"]) == 1

    @pytest.mark.asyncio
    async def test_refreshes_usage_stats(self, db, quiz_types):
        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator())

        await orchestrator.create_authored_quiz(
            quiz_name="Waves",
            description=None,
            is_private=True,
            document_urls=["http://docs/waves.pdf"],
            stages=stages_for(quiz_types, "MCQ"),
            user_id=OWNER_ID,
        )

        stats = db.query(UserStats).filter(UserStats.user_id == OWNER_ID).one()
        assert stats.total_quizzes == 1
        assert stats.private_quizzes == 1
        assert stats.normal_quizzes == 1

    @pytest.mark.asyncio
    async def test_failed_type_removes_quiz_and_content(self, db, quiz_types):
        """A failure on the second type leaves nothing behind"""
        generator = FakeGenerator(failures={"Descriptive": DependencyFailure("Status 500: boom")})
        orchestrator = QuizDraftOrchestrator(db, generator=generator)

        with pytest.raises(GenerationFailed) as exc_info:
            await orchestrator.create_authored_quiz(
                quiz_name="Thermodynamics",
                description=None,
                is_private=False,
                document_urls=["http://docs/ch3.pdf"],
                stages=stages_for(quiz_types, "MCQ", "Descriptive", "Numerical"),
                user_id=OWNER_ID,
            )

        assert isinstance(exc_info.value.__cause__, DependencyFailure)
        assert generator.calls == ["MCQ", "Descriptive"]
        assert db.query(Quiz).count() == 0
        assert db.query(QuizContent).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_type_rolls_back(self, db, quiz_types):
        generator = FakeGenerator()
        orchestrator = QuizDraftOrchestrator(db, generator=generator)
        stages = stages_for(quiz_types, "MCQ") + [
            GenerationStage(type_id=uuid.uuid4(), easy=1, medium=0, hard=0)
        ]

        with pytest.raises(GenerationFailed):
            await orchestrator.create_authored_quiz(
                quiz_name="Optics",
                description=None,
                is_private=False,
                document_urls=["http://docs/ch4.pdf"],
                stages=stages,
                user_id=OWNER_ID,
            )

        assert db.query(Quiz).count() == 0
        assert db.query(QuizContent).count() == 0

    @pytest.mark.asyncio
    async def test_malformed_response_rolls_back(self, db, quiz_types):
        generator = FakeGenerator(failures={"MCQ": MalformedResponse("no questions")})
        orchestrator = QuizDraftOrchestrator(db, generator=generator)

        with pytest.raises(GenerationFailed):
            await orchestrator.create_authored_quiz(
                quiz_name="Electricity",
                description=None,
                is_private=False,
                document_urls=["http://docs/ch5.pdf"],
                stages=stages_for(quiz_types, "MCQ"),
                user_id=OWNER_ID,
            )

        assert db.query(Quiz).count() == 0

    @pytest.mark.asyncio
    async def test_failed_content_commit_removes_quiz_and_content(self, db, quiz_types):
        """A stage whose insert violates (quiz, type) uniqueness still rolls everything back"""
        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator())

        with pytest.raises(GenerationFailed) as exc_info:
            await orchestrator.create_authored_quiz(
                quiz_name="Friction",
                description=None,
                is_private=False,
                document_urls=["http://docs/ch6.pdf"],
                stages=stages_for(quiz_types, "MCQ", "MCQ"),
                user_id=OWNER_ID,
            )

        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
        assert db.query(Quiz).count() == 0
        assert db.query(QuizContent).count() == 0

    @pytest.mark.asyncio
    async def test_failed_finalize_removes_quiz_and_content(self, db, quiz_types):
        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator())
        orchestrator._finalize = MagicMock(side_effect=SQLAlchemyError("commit failed"))

        with pytest.raises(GenerationFailed):
            await orchestrator.create_authored_quiz(
                quiz_name="Gravitation",
                description=None,
                is_private=False,
                document_urls=["http://docs/ch7.pdf"],
                stages=stages_for(quiz_types, "MCQ", "Numerical"),
                user_id=OWNER_ID,
            )

        assert db.query(Quiz).count() == 0
        assert db.query(QuizContent).count() == 0

    @pytest.mark.asyncio
    async def test_requires_documents(self, db, quiz_types):
        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator())

        with pytest.raises(EmptyDocumentSet):
            await orchestrator.create_authored_quiz(
                quiz_name="Empty",
                description=None,
                is_private=False,
                document_urls=[],
                stages=stages_for(quiz_types, "MCQ"),
                user_id=OWNER_ID,
            )

        assert db.query(Quiz).count() == 0


class TestQuickQuiz:
    """Quick quiz generation from uploaded files"""

    @pytest.mark.asyncio
    async def test_skips_failing_type_and_deletes_uploads(self, db, quiz_types, storage):
        generator = FakeGenerator(failures={"Descriptive": DependencyFailure("timeout")})
        orchestrator = QuizDraftOrchestrator(db, generator=generator, storage=storage)

        quiz = await orchestrator.create_quick_quiz(
            OWNER_ID, [("ch1.pdf", b"%PDF-1"), ("ch2.pdf", b"%PDF-2")]
        )

        assert quiz.is_completed is True
        assert quiz.quick_quiz is True
        assert quiz.is_private is True
        assert quiz.subject == "Quick Quiz"
        assert quiz.quiz_name.startswith("Quiz_")
        assert quiz.document_urls == ["http://docs/ch1.pdf", "http://docs/ch2.pdf"]
        assert generator.calls == ["MCQ", "Descriptive"]

        contents = db.query(QuizContent).filter(QuizContent.quiz_id == quiz.quiz_id).all()
        assert len(contents) == 1
        assert contents[0].type_id == quiz_types["MCQ"].type_id
        assert (contents[0].easy_count, contents[0].medium_count, contents[0].hard_count) == (5, 3, 2)

        deleted = [call.args[0] for call in storage.delete.await_args_list]
        assert deleted == ["http://docs/ch1.pdf", "http://docs/ch2.pdf"]

    @pytest.mark.asyncio
    async def test_all_types_failing_removes_quiz(self, db, quiz_types, storage):
        generator = FakeGenerator(failures={
            "MCQ": DependencyFailure("down"),
            "Descriptive": DependencyFailure("down"),
        })
        orchestrator = QuizDraftOrchestrator(db, generator=generator, storage=storage)

        with pytest.raises(GenerationFailed):
            await orchestrator.create_quick_quiz(OWNER_ID, [("ch1.pdf", b"%PDF")])

        assert db.query(Quiz).count() == 0
        storage.delete.assert_awaited_once_with("http://docs/ch1.pdf")

    @pytest.mark.asyncio
    async def test_rejects_empty_upload(self, db, quiz_types, storage):
        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator(), storage=storage)

        with pytest.raises(EmptyDocumentSet):
            await orchestrator.create_quick_quiz(OWNER_ID, [])

        storage.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_too_many_files(self, db, quiz_types, storage):
        orchestrator = QuizDraftOrchestrator(db, generator=FakeGenerator(), storage=storage)
        files = [(f"ch{i}.pdf", b"%PDF") for i in range(11)]

        with pytest.raises(ValidationError):
            await orchestrator.create_quick_quiz(OWNER_ID, files)

        storage.upload.assert_not_awaited()
