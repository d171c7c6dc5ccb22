"""JLPT quiz endpoints."""

from kotoba.api import ApiClient
from kotoba.schemas import JlptLevel, QuizQuestion

DEFAULT_QUESTION_COUNT = 10


class QuizService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def questions(
        self, level: JlptLevel, count: int = DEFAULT_QUESTION_COUNT
    ) -> list[QuizQuestion]:
        """Get `count` random questions for a JLPT level."""
        envelope = await self.client.fetch_envelope(
            "GET", f"/api/quiz/{level.value}", list[QuizQuestion], params={"count": count}
        )
        return envelope.data_or([])
