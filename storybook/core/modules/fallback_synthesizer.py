"""
Module for building a complete story without the text model.

Used when the text model's response cannot be parsed. Every field is
filled from templates over the request, so any request yields a story
with the right page count and no empty fields. The same templates back
ResponseParser's padding and backfill.
"""

import re
from typing import Optional

from storybook.config import get_length_profile
from ..types import GeneratedStory, LengthProfile, StoryPage, StoryRequest
from .prompt_builder import art_style, build_character_sheet, moral_lesson


# Interior pages rotate through these by page number
CONTINUATION_TEMPLATES = (
    "{child} and the {character} explored more of the {setting} together, "
    "learning something new about {theme} at every step.",
    "Along the way, {child} and the {character} met a new challenge in the {setting}. "
    "They worked together and remembered what {theme} really means.",
    "The {setting} was full of surprises. {child} listened carefully, "
    "and the {character} showed how {theme} can make every day brighter.",
    "{child} felt a little unsure, but the {character} smiled and said, "
    "\"We can do this together.\" Their adventure about {theme} continued.",
)

CONTINUATION_SCENES = (
    "exploring together",
    "solving a problem side by side",
    "discovering something surprising",
    "encouraging each other",
)

_ARTICLE_RE = re.compile(r"^(a|an|the)\s+", re.IGNORECASE)


def character_noun(request: StoryRequest) -> str:
    """Main character without a leading article, for "the <character>" phrasing."""
    return _ARTICLE_RE.sub("", request.main_character.strip()) or request.main_character


def _fields(request: StoryRequest) -> dict:
    return {
        "child": request.child_name,
        "character": character_noun(request),
        "setting": request.setting,
        "theme": request.theme,
        "moral": moral_lesson(request),
    }


def page_image_prompt(request: StoryRequest, scene: str) -> str:
    f = _fields(request)
    return (
        f"A child named {f['child']} with a {f['character']} in {f['setting']}, {scene}, "
        f"children's book illustration in {art_style(request)} style"
    )


def opening_page(request: StoryRequest) -> StoryPage:
    f = _fields(request)
    return StoryPage(
        page_number=1,
        content=(
            f"Once upon a time, there was a child named {f['child']} who met a wonderful "
            f"{f['character']} in {f['setting']}. This is their magical adventure about {f['theme']}."
        ),
        image_prompt=page_image_prompt(request, "meeting for the first time"),
    )


def continuation_page(request: StoryRequest, page_number: int) -> StoryPage:
    """Generic interior page used for fallback stories and for padding."""
    index = (page_number - 2) % len(CONTINUATION_TEMPLATES)
    return StoryPage(
        page_number=page_number,
        content=CONTINUATION_TEMPLATES[index].format(**_fields(request)),
        image_prompt=page_image_prompt(request, CONTINUATION_SCENES[index]),
    )


def closing_page(request: StoryRequest, page_number: int) -> StoryPage:
    f = _fields(request)
    return StoryPage(
        page_number=page_number,
        content=(
            f"As the day came to an end, {f['child']} and the {f['character']} smiled at each other. "
            f"They had learned that {f['moral']} can make any adventure wonderful. The end."
        ),
        image_prompt=page_image_prompt(request, "celebrating together at sunset"),
    )


def default_title(request: StoryRequest) -> str:
    return f"{request.child_name} and the {character_noun(request)}"


def default_summary(request: StoryRequest) -> str:
    f = _fields(request)
    return (
        f"A heartwarming story about {f['child']} learning about {f['theme']} "
        f"with help from a {f['character']}."
    )


def default_key_vocabulary(request: StoryRequest) -> list[str]:
    words = ["adventure", "friendship", "brave"]
    theme = request.theme.strip().lower()
    if theme and " " not in theme and theme not in words:
        words.append(theme)
    return words


def default_discussion_questions(request: StoryRequest) -> list[str]:
    f = _fields(request)
    return [
        f"What did {f['child']} learn from the {f['character']}?",
        f"How can you be brave like {f['child']}?",
        f"What does {f['theme']} mean to you?",
    ]


def default_activity_idea(request: StoryRequest) -> str:
    f = _fields(request)
    return (
        f"Draw your own picture of {f['child']} and the {f['character']} "
        f"having an adventure together."
    )


class FallbackSynthesizer:
    """
    Build a schema-valid story from the request alone.

    Never raises for a well-formed StoryRequest and needs no external
    service, so the generation step always has a story to illustrate.
    """

    def synthesize(
        self,
        request: StoryRequest,
        profile: Optional[LengthProfile] = None,
    ) -> GeneratedStory:
        """
        Build a complete story with exactly profile.page_count pages.

        Args:
            request: The story request
            profile: Length profile; resolved from request.story_length if omitted

        Returns:
            GeneratedStory with no image URLs set
        """
        profile = profile or get_length_profile(request.story_length)
        page_count = max(profile.page_count, 1)

        if page_count == 1:
            opening = opening_page(request)
            closing = closing_page(request, 1)
            pages = [StoryPage(
                page_number=1,
                content=f"{opening.content} {closing.content}",
                image_prompt=opening.image_prompt,
            )]
        else:
            pages = [opening_page(request)]
            pages.extend(continuation_page(request, n) for n in range(2, page_count))
            pages.append(closing_page(request, page_count))

        return GeneratedStory(
            title=default_title(request),
            pages=pages,
            summary=default_summary(request),
            key_vocabulary=default_key_vocabulary(request),
            discussion_questions=default_discussion_questions(request),
            activity_idea=default_activity_idea(request),
            character_sheet=build_character_sheet(request),
        )
