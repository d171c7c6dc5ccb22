"""Typed wrappers over the API's resource endpoints."""

from kotoba.services.auth import AuthService
from kotoba.services.diary import DiaryService
from kotoba.services.quiz import QuizService
from kotoba.services.users import UserService
from kotoba.services.vocabulary import VocabularyService

__all__ = [
    "AuthService",
    "DiaryService",
    "QuizService",
    "UserService",
    "VocabularyService",
]
