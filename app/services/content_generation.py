"""
Content generation adapter
Calls the question-generation service for one question type and buckets the
result by difficulty
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.exceptions import MalformedResponse
from app.models import DIFFICULTY_LEVELS
from app.services.llm_client import LLMServiceClient, llm_client

logger = logging.getLogger(__name__)

# Service field name -> stored field name
_FIELD_ALIASES = {
    "question": ("Questions", "Question", "question"),
    "answer": ("Answer", "answer"),
    "explanation": ("Explanation", "explanation"),
    "options": ("Options", "options"),
    "difficulty": ("Difficulty", "difficulty"),
}


def _pick(raw: Dict[str, Any], names) -> Any:
    for name in names:
        if name in raw:
            return raw[name]
    return None


def normalize_question(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Map one generated question onto the stored question shape"""
    question = {
        "question": _pick(raw, _FIELD_ALIASES["question"]),
        "answer": _pick(raw, _FIELD_ALIASES["answer"]),
        "explanation": _pick(raw, _FIELD_ALIASES["explanation"]),
        "difficulty": str(_pick(raw, _FIELD_ALIASES["difficulty"]) or "").lower(),
    }
    options = _pick(raw, _FIELD_ALIASES["options"])
    if options:
        question["options"] = options
    return question


class ContentGenerationAdapter:
    """Translate a generation request into the service contract and back"""

    def __init__(self, client: Optional[LLMServiceClient] = None):
        self.client = client or llm_client

    async def generate(
        self,
        document_urls: List[str],
        type_name: str,
        easy: int,
        medium: int,
        hard: int,
        folder_name: Optional[str] = None,
        user_id: Optional[UUID] = None,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Generate questions for one type

        Args:
            document_urls: Source document references
            type_name: Catalog display name; sent lower-cased
            easy, medium, hard: Requested counts per difficulty
            folder_name: Session/folder name on the service side
            user_id: Requesting user

        Returns:
            {"easy": [...], "medium": [...], "hard": [...]}

        Raises:
            DependencyFailure: the service call failed
            MalformedResponse: no question list in the response
        """
        payload = {
            "pdf_urls": list(document_urls),
            "question_type": type_name.lower(),
            "easy_questions": easy,
            "medium_questions": medium,
            "hard_questions": hard,
        }
        if folder_name is not None:
            payload["folder_name"] = folder_name
        if user_id is not None:
            payload["user_id"] = str(user_id)

        logger.info(
            f"Requesting '{payload['question_type']}' questions "
            f"(easy={easy}, medium={medium}, hard={hard}) for {len(document_urls)} document(s)"
        )

        response = await self.client.create_quiz(payload)

        questions = response.get("questions") if isinstance(response, dict) else None
        if not isinstance(questions, list):
            raise MalformedResponse(
                "Unexpected response format. 'questions' is missing or not an array."
            )

        return self._partition(questions, type_name, easy + medium + hard)

    def _partition(
        self,
        questions: List[Any],
        type_name: str,
        expected: int,
    ) -> Dict[str, List[Dict[str, Any]]]:
        buckets = {level: [] for level in DIFFICULTY_LEVELS}
        dropped = 0

        for raw in questions:
            if not isinstance(raw, dict):
                dropped += 1
                continue
            question = normalize_question(raw)
            if question["difficulty"] not in buckets:
                dropped += 1
                continue
            buckets[question["difficulty"]].append(question)

        if dropped:
            logger.warning(f"Dropped {dropped} '{type_name}' question(s) without a valid difficulty tag")

        received = sum(len(bucket) for bucket in buckets.values())
        if received != expected:
            logger.warning(f"Expected {expected} '{type_name}' questions, got {received}")

        return buckets


# Global instance
content_generator = ContentGenerationAdapter()
