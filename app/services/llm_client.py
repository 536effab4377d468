"""
HTTP client for the question-generation and feedback service
"""
import httpx
import logging
from typing import Any, Dict, Optional

from app.config import settings
from app.exceptions import DependencyFailure

logger = logging.getLogger(__name__)


class LLMServiceClient:
    """
    Thin async client for the external LLM service

    Endpoints:
    - POST /create-quiz: generate questions for one question type
    - POST /feedback: score one subjective answer (0-100) with feedback text

    No retries here; callers decide whether a failure is fatal.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.LLM_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.LLM_REQUEST_TIMEOUT
        self.transport = transport

    async def post(self, path: str, payload: Dict[str, Any]) -> Any:
        """
        POST a JSON payload and return the decoded JSON body

        Raises:
            DependencyFailure: non-2xx status, network error or non-JSON body
        """
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            raise DependencyFailure(self._describe_status_error(e.response)) from e
        except httpx.RequestError as e:
            logger.error(f"LLM service unreachable at {url}: {str(e)}")
            raise DependencyFailure(
                "No response received: Network Error (Couldn't connect to the server)"
            ) from e
        except ValueError as e:
            raise DependencyFailure(f"Invalid JSON received from {path}") from e

    def _describe_status_error(self, response: httpx.Response) -> str:
        status = response.status_code
        if status == 404:
            return f"Status {status}: (Not Found) Incorrect API call - {response.request.url}"

        try:
            data = response.json()
        except ValueError:
            data = {}

        if isinstance(data, dict):
            message = data.get("message") or data.get("detail")
        else:
            message = None
        return f"Status {status}: {message or response.text}"

    async def create_quiz(self, payload: Dict[str, Any]) -> Any:
        return await self.post("/create-quiz", payload)

    async def feedback(self, payload: Dict[str, Any]) -> Any:
        return await self.post("/feedback", payload)


# Global instance
llm_client = LLMServiceClient()
