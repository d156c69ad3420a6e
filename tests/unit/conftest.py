"""Pytest fixtures for unit tests."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from storybook.api import config
from storybook.api.dependencies import get_archive, get_pipeline
from storybook.api.main import app
from storybook.api.services.story_archive import StoryArchive
from storybook.core.programs.story_pipeline import StoryPipeline
from storybook.core.types import ImageRequest, StoryRequest


# =============================================================================
# Fake collaborators
# =============================================================================


class FakeTextGenerator:
    """Returns canned text, or raises the given error."""

    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate(self, system_text: str, prompt_text: str, temperature: float) -> str:
        self.calls.append(
            {"system_text": system_text, "prompt_text": prompt_text, "temperature": temperature}
        )
        if self.error:
            raise self.error
        return self.text


class FakeImageGenerator:
    """
    Returns /images/page_NN.png per page.

    Pages in fail_pages raise; with reverse_order=True later pages finish first.
    """

    def __init__(self, fail_pages=(), fail_all: bool = False, reverse_order: bool = False):
        self.fail_pages = set(fail_pages)
        self.fail_all = fail_all
        self.reverse_order = reverse_order
        self.requests: list[ImageRequest] = []
        self.completion_order: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate(self, request: ImageRequest) -> str:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.reverse_order:
                await asyncio.sleep(0.001 * (50 - request.page_number))
            else:
                await asyncio.sleep(0)
            if self.fail_all or request.page_number in self.fail_pages:
                raise RuntimeError(f"image service unavailable for page {request.page_number}")
            self.completion_order.append(request.page_number)
            return f"/images/page_{request.page_number:02d}.png"
        finally:
            self.in_flight -= 1


# =============================================================================
# Request and response fixtures
# =============================================================================


def make_story_json(page_count: int, title: str = "Mia and the Clever Fox", **overrides) -> str:
    """Well-formed text-model response with page_count pages."""
    data = {
        "title": title,
        "characterSheet": "A small red fox with a white-tipped tail and a green scarf",
        "pages": [
            {
                "pageNumber": n,
                "content": f"Page {n} of the story.",
                "imagePrompt": f"A small red fox with a green scarf, scene {n}, cartoon style",
                "vocabulary": ["forest", "friend"],
            }
            for n in range(1, page_count + 1)
        ],
        "summary": "Mia and a fox become friends in the forest.",
        "keyVocabulary": ["forest", "friend", "share", "brave", "kind"],
        "discussionQuestions": ["How did Mia help the fox?", "What makes a good friend?"],
        "activityIdea": "Draw a map of the forest Mia explored.",
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def story_json():
    """Factory for well-formed text-model responses."""
    return make_story_json


@pytest.fixture
def text_generator_cls():
    return FakeTextGenerator


@pytest.fixture
def image_generator_cls():
    return FakeImageGenerator


@pytest.fixture
def story_request():
    """The short-story request used throughout the examples."""
    return StoryRequest(
        child_name="Mia",
        child_age="4-6",
        main_character="a fox",
        setting="forest",
        theme="friendship",
        story_length="short",
        difficulty="beginner",
        personality_traits=[],
    )


@pytest.fixture
def make_request(story_request):
    """Factory for requests that differ from story_request in a few fields."""
    from dataclasses import replace

    def _make(**changes) -> StoryRequest:
        return replace(story_request, **changes)

    return _make


@pytest.fixture
def request_body():
    """camelCase JSON body for POST /stories/generate."""
    return {
        "childName": "Mia",
        "childAge": "4-6",
        "mainCharacter": "a fox",
        "setting": "forest",
        "theme": "friendship",
        "storyLength": "short",
        "difficulty": "beginner",
        "personalityTraits": [],
    }


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the API config at a temporary data directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "STORIES_DIR", data_dir / "stories")
    monkeypatch.setattr(config, "IMAGES_DIR", data_dir / "images")
    return data_dir


@pytest.fixture
def client_with_fakes(temp_data_dir):
    """TestClient whose pipeline uses fake text and image generators.

    Yields (client, text_generator, image_generator).
    """
    text_generator = FakeTextGenerator(text=make_story_json(6))
    image_generator = FakeImageGenerator()
    pipeline = StoryPipeline(text_generator=text_generator, image_generator=image_generator)

    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_archive] = lambda: StoryArchive(config.STORIES_DIR)

    with TestClient(app) as client:
        yield client, text_generator, image_generator

    app.dependency_overrides.clear()
