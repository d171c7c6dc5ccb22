"""Pydantic schemas for the API's request and response bodies.

The API speaks camelCase; fields are snake_case here and serialized by alias.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        """Dump as a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Auth ---


class LoginRequest(CamelModel):
    """Schema for logging in."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignupRequest(CamelModel):
    """Schema for registering a new account."""

    username: str = Field(..., min_length=1, description="Username for the new account")
    password: str = Field(..., min_length=1)
    password_confirm: str = Field(..., min_length=1, description="Must equal password")
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    nickname: str = Field(..., min_length=1)

    def passwords_match(self) -> bool:
        return self.password == self.password_confirm


class UserInfo(CamelModel):
    """Identity returned by the session probe."""

    id: int | None = None
    username: str
    email: str
    nickname: str
    role: str = "USER"


class UpdateProfileRequest(CamelModel):
    """Schema for editing the current account's profile."""

    nickname: str = Field(..., min_length=2, max_length=50)
    email: str = Field(..., max_length=50, pattern=r"^[^@\s]+@[^@\s]+$")


class ChangePasswordRequest(CamelModel):
    """Schema for changing the current account's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=20)
    new_password_confirm: str = Field(..., min_length=1)

    def passwords_match(self) -> bool:
        return self.new_password == self.new_password_confirm


# --- Vocabulary ---


class StudyStatus(str, Enum):
    NOT_STUDIED = "NOT_STUDIED"
    STUDYING = "STUDYING"
    COMPLETED = "COMPLETED"


class VocabularyCreateRequest(CamelModel):
    """Schema for registering a vocabulary card."""

    word: str = Field(..., min_length=1)
    hiragana: str = Field(..., min_length=1)
    meaning: str = Field(..., min_length=1)
    example_sentence: str | None = None
    example_translation: str | None = None


class VocabularyUpdateRequest(VocabularyCreateRequest):
    """Schema for updating a vocabulary card."""

    study_status: StudyStatus


class VocabularyListResponse(CamelModel):
    """Vocabulary card as listed."""

    id: int
    word: str
    hiragana: str
    meaning: str
    study_status: StudyStatus
    study_status_display: str | None = None
    create_date: str | None = None


class VocabularyResponse(VocabularyListResponse):
    """Vocabulary card with examples."""

    example_sentence: str | None = None
    example_translation: str | None = None
    update_date: str | None = None


# --- Diary ---


class DiaryCreateRequest(CamelModel):
    """Schema for writing a diary entry."""

    diary_date: str = Field(..., description='Entry date, e.g. "2024-11-22"')
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    is_public: bool = False


class DiaryUpdateRequest(DiaryCreateRequest):
    """Schema for editing a diary entry."""


class DiaryListResponse(CamelModel):
    """Diary entry as listed."""

    id: int
    nickname: str
    diary_date: str
    title: str
    content_preview: str = ""
    is_public: bool
    create_date: str | None = None


class DiaryResponse(CamelModel):
    """Full diary entry."""

    id: int
    username: str
    nickname: str
    diary_date: str
    title: str
    content: str
    is_public: bool
    create_date: str | None = None
    update_date: str | None = None


# --- Quiz ---


class JlptLevel(str, Enum):
    N5 = "N5"
    N4 = "N4"
    N3 = "N3"
    N2 = "N2"
    N1 = "N1"


class QuizQuestion(CamelModel):
    """One multiple-choice quiz question."""

    id: int
    question: str
    question_type: str
    choices: list[str]
    correct_answer: str
    level: str
    explanation: str | None = None
