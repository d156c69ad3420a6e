"""
Module for turning raw text-model output into a GeneratedStory.

The text model is asked for bare JSON but often wraps it in code fences
or prose, drops fields, or returns the wrong number of pages. Parsing is
a single pass:

1. Strip code fences and take the outermost {...} span
2. Decode JSON and check for a title and a pages list
3. Normalize pages and renumber them 1..N
4. Pad or truncate to the requested page count
5. Backfill missing companion fields from templates

Steps 1-2 can fail; the failure is returned as a ParseFailure value so
the caller can switch to FallbackSynthesizer. Steps 3-5 only repair.
"""

import json
import logging
import re
from typing import Any, Optional, Union

from ..types import GeneratedStory, ParseFailure, ParseFailureReason, StoryPage, StoryRequest
from .fallback_synthesizer import (
    continuation_page,
    default_activity_idea,
    default_discussion_questions,
    default_key_vocabulary,
    default_summary,
    page_image_prompt,
)
from .prompt_builder import build_character_sheet

logger = logging.getLogger(__name__)

ParseResult = Union[GeneratedStory, ParseFailure]

# JSON strings cannot hold raw newlines, so a fence line is never inside a value
_FENCE_RE = re.compile(r"^[ \t]*```[a-zA-Z]*[ \t]*$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence lines, keeping their contents."""
    return _FENCE_RE.sub("", text)


def extract_json_span(text: str) -> Optional[str]:
    """Return the substring from the first '{' to the last '}', if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start:end + 1]


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_string_list(value: Any) -> list[str]:
    """Non-empty strings from a list; anything else yields []."""
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class ResponseParser:
    """
    Extract and repair a story from a text-model response.

    Pure and deterministic: the same text and request always produce
    structurally identical results.
    """

    def _normalize_pages(self, raw_pages: list, request: StoryRequest) -> list[StoryPage]:
        """Keep usable page objects and renumber them densely from 1."""
        pages = []
        for entry in raw_pages:
            if not isinstance(entry, dict):
                continue

            content = _as_text(entry.get("content"))
            if not content:
                continue

            image_prompt = _as_text(entry.get("imagePrompt")) or page_image_prompt(
                request, "a scene from the story"
            )
            vocabulary = _as_string_list(entry.get("vocabulary")) or None

            pages.append(StoryPage(
                page_number=len(pages) + 1,
                content=content,
                image_prompt=image_prompt,
                vocabulary=vocabulary,
            ))
        return pages

    def _reconcile_page_count(
        self,
        pages: list[StoryPage],
        request: StoryRequest,
        page_count: int,
    ) -> list[StoryPage]:
        """Pad with continuation pages or truncate to exactly page_count."""
        if len(pages) != page_count:
            logger.warning(f"Expected {page_count} pages, got {len(pages)}; reconciling")

        if len(pages) > page_count:
            return pages[:page_count]

        padded = list(pages)
        for page_number in range(len(pages) + 1, page_count + 1):
            padded.append(continuation_page(request, page_number))
        return padded

    def parse(self, text: Optional[str], request: StoryRequest, page_count: int) -> ParseResult:
        """
        Parse a text-model response into a story.

        Args:
            text: Raw text returned by the text model
            request: The original request, used for defaults
            page_count: Exact number of pages the story must have

        Returns:
            GeneratedStory on success, ParseFailure otherwise
        """
        span = extract_json_span(strip_code_fences(text or ""))
        if span is None:
            return ParseFailure(ParseFailureReason.NO_JSON_FOUND, "No JSON object in response")

        try:
            data = json.loads(span)
        except json.JSONDecodeError as e:
            return ParseFailure(ParseFailureReason.INVALID_JSON, str(e))

        if not isinstance(data, dict):
            return ParseFailure(ParseFailureReason.INVALID_JSON, "Top-level JSON value is not an object")

        title = _as_text(data.get("title"))
        raw_pages = data.get("pages")
        if not title or not isinstance(raw_pages, list):
            return ParseFailure(ParseFailureReason.MISSING_FIELDS, "Story needs a title and a pages list")

        pages = self._normalize_pages(raw_pages, request)
        pages = self._reconcile_page_count(pages, request, page_count)

        return GeneratedStory(
            title=title,
            pages=pages,
            summary=_as_text(data.get("summary")) or default_summary(request),
            key_vocabulary=(
                _as_string_list(data.get("keyVocabulary")) or default_key_vocabulary(request)
            ),
            discussion_questions=(
                _as_string_list(data.get("discussionQuestions"))
                or default_discussion_questions(request)
            ),
            activity_idea=_as_text(data.get("activityIdea")) or default_activity_idea(request),
            character_sheet=_as_text(data.get("characterSheet")) or build_character_sheet(request),
        )
