"""Vocabulary card endpoints."""

from kotoba.api import ApiClient
from kotoba.schemas import (
    StudyStatus,
    VocabularyCreateRequest,
    VocabularyListResponse,
    VocabularyResponse,
    VocabularyUpdateRequest,
)

BASE_PATH = "/api/vocabularies"


class VocabularyService:
    """CRUD over the current user's vocabulary cards."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def create(self, request: VocabularyCreateRequest) -> VocabularyResponse:
        envelope = await self.client.fetch_envelope(
            "POST", BASE_PATH, VocabularyResponse, json=request.to_wire()
        )
        return envelope.require_data()

    async def list_mine(self) -> list[VocabularyListResponse]:
        """Get all of the current user's cards."""
        envelope = await self.client.fetch_envelope(
            "GET", BASE_PATH, list[VocabularyListResponse]
        )
        return envelope.data_or([])

    async def list_by_status(self, status: StudyStatus) -> list[VocabularyListResponse]:
        envelope = await self.client.fetch_envelope(
            "GET", f"{BASE_PATH}/status/{status.value}", list[VocabularyListResponse]
        )
        return envelope.data_or([])

    async def search(self, keyword: str) -> list[VocabularyListResponse]:
        """Search cards by word, reading or meaning."""
        envelope = await self.client.fetch_envelope(
            "GET",
            f"{BASE_PATH}/search",
            list[VocabularyListResponse],
            params={"keyword": keyword},
        )
        return envelope.data_or([])

    async def get(self, vocabulary_id: int) -> VocabularyResponse:
        envelope = await self.client.fetch_envelope(
            "GET", f"{BASE_PATH}/{vocabulary_id}", VocabularyResponse
        )
        return envelope.require_data()

    async def update(
        self, vocabulary_id: int, request: VocabularyUpdateRequest
    ) -> VocabularyResponse:
        envelope = await self.client.fetch_envelope(
            "PUT", f"{BASE_PATH}/{vocabulary_id}", VocabularyResponse, json=request.to_wire()
        )
        return envelope.require_data()

    async def delete(self, vocabulary_id: int) -> None:
        await self.client.delete(f"{BASE_PATH}/{vocabulary_id}")

    async def update_study_status(
        self, vocabulary_id: int, status: StudyStatus
    ) -> VocabularyResponse:
        """Change only the study status of a card."""
        envelope = await self.client.fetch_envelope(
            "PATCH",
            f"{BASE_PATH}/{vocabulary_id}/status",
            VocabularyResponse,
            params={"studyStatus": status.value},
        )
        return envelope.require_data()
