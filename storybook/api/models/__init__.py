"""Pydantic models for API requests and responses."""

from .requests import GenerateStoryRequest
from .responses import GeneratedStoryResponse, StoryPageResponse

__all__ = [
    "GenerateStoryRequest",
    "GeneratedStoryResponse",
    "StoryPageResponse",
]
