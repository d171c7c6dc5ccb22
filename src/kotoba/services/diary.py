"""Diary endpoints."""

from kotoba.api import ApiClient
from kotoba.schemas import (
    DiaryCreateRequest,
    DiaryListResponse,
    DiaryResponse,
    DiaryUpdateRequest,
)

BASE_PATH = "/api/diary"


class DiaryService:
    """Diary entries: the user's own and the public feed."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def create(self, request: DiaryCreateRequest) -> DiaryResponse:
        """
        Write a new diary entry.

        Raises:
            MissingDataError: If the server answered without the created entry
        """
        envelope = await self.client.fetch_envelope(
            "POST", BASE_PATH, DiaryResponse, json=request.to_wire()
        )
        return envelope.require_data()

    async def list_public(self) -> list[DiaryListResponse]:
        envelope = await self.client.fetch_envelope(
            "GET", f"{BASE_PATH}/public", list[DiaryListResponse]
        )
        return envelope.data_or([])

    async def list_mine(self) -> list[DiaryListResponse]:
        envelope = await self.client.fetch_envelope(
            "GET", f"{BASE_PATH}/my", list[DiaryListResponse]
        )
        return envelope.data_or([])

    async def get(self, diary_id: int) -> DiaryResponse:
        envelope = await self.client.fetch_envelope(
            "GET", f"{BASE_PATH}/{diary_id}", DiaryResponse
        )
        return envelope.require_data()

    async def update(self, diary_id: int, request: DiaryUpdateRequest) -> DiaryResponse:
        envelope = await self.client.fetch_envelope(
            "PUT", f"{BASE_PATH}/{diary_id}", DiaryResponse, json=request.to_wire()
        )
        return envelope.require_data()

    async def delete(self, diary_id: int) -> None:
        await self.client.delete(f"{BASE_PATH}/{diary_id}")
