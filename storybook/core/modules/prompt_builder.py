"""
Module for building the story generation prompt.

Turns a StoryRequest into the prompt pair sent to the text model. The
prompt spells out the exact JSON shape and page count, and the system
text demands JSON-only output. Neither guarantees well-formed output;
ResponseParser handles whatever comes back.
"""

from storybook.config import STORY_DEFAULTS, get_length_profile, get_vocabulary_instruction
from ..types import StoryPrompt, StoryRequest


SYSTEM_TEXT = """You are a world-class children's story author and educational expert.
Respond with a single JSON object and nothing else.
Do not wrap the JSON in Markdown code fences.
Do not add any commentary before or after the JSON."""


def format_traits(request: StoryRequest) -> str:
    """Join personality traits, defaulting when none were chosen."""
    traits = [t.strip() for t in request.personality_traits if t and t.strip()]
    return ", ".join(traits) if traits else STORY_DEFAULTS["personality_traits"]


def moral_lesson(request: StoryRequest) -> str:
    return request.moral_lesson.strip() or STORY_DEFAULTS["moral_lesson"]


def art_style(request: StoryRequest) -> str:
    return request.art_style.strip() or STORY_DEFAULTS["art_style"]


def build_character_sheet(request: StoryRequest) -> str:
    """
    Build the character consistency directive.

    The text model is asked to open every page's image prompt with this
    sheet so the image model sees the same character description each time.
    """
    description = request.character_description.strip() or STORY_DEFAULTS["character_description"]
    return (
        f"Character Appearance: {description} with these personality traits: "
        f"{format_traits(request)}. Keep this appearance consistent throughout all illustrations."
    )


class PromptBuilder:
    """
    Build the text-model prompt for a story request.

    Pure: the output depends only on the request and the fixed lookup
    tables in storybook.config.story.
    """

    def _build_image_context(self, request: StoryRequest) -> str:
        if not request.uploaded_image:
            return ""
        return (
            "IMPORTANT: The user has uploaded an inspiration image. Incorporate elements, "
            "colors, or themes from this image into the story and illustrations where appropriate."
        )

    def _build_output_format(self, page_count: int, style: str) -> str:
        """The JSON shape the text model must return."""
        return f"""FORMAT YOUR RESPONSE AS JSON with exactly {page_count} entries in "pages":
{{
  "title": "Story Title Here",
  "characterSheet": "Detailed physical description for consistent character appearance",
  "pages": [
    {{
      "pageNumber": 1,
      "content": "Page content here...",
      "imagePrompt": "[Character sheet details] + scene description in {style} style",
      "vocabulary": ["word1", "word2"]
    }}
  ],
  "summary": "Brief story summary...",
  "keyVocabulary": ["word1", "word2", "word3", "word4", "word5"],
  "discussionQuestions": ["Question 1?", "Question 2?", "Question 3?"],
  "activityIdea": "A creative activity suggestion related to the story theme"
}}"""

    def build(self, request: StoryRequest) -> StoryPrompt:
        """
        Build the prompt for a story request.

        Args:
            request: A validated story request

        Returns:
            StoryPrompt with prompt/system text and the page and word targets
        """
        profile = get_length_profile(request.story_length)
        style = art_style(request)
        moral = moral_lesson(request)
        character_sheet = build_character_sheet(request)
        image_context = self._build_image_context(request)

        prompt_text = f"""Create a personalized, engaging children's storybook with educational value.

STORY DETAILS:
- Child's Name: {request.child_name}
- Age Group: {request.child_age}
- Reading Level: {request.difficulty} - {get_vocabulary_instruction(request.difficulty)}
- Main Character: {request.main_character}
- Character Details: {character_sheet}
- Setting: {request.setting}
- Theme: {request.theme}
- Moral Lesson: {moral}
- Story Length: {profile.page_count} pages, approximately {profile.words_per_page} words per page
- Art Style: {style}

{image_context}

CHARACTER CONSISTENCY REQUIREMENTS:
- Create a detailed character sheet description
- Use this character sheet in every image prompt to maintain consistent appearance
- Include specific details about appearance, clothing, and distinguishing features

STORY REQUIREMENTS:
1. Create an engaging, age-appropriate title
2. Write exactly {profile.page_count} pages of story content
3. Each page should be approximately {profile.words_per_page} words
4. Include {request.child_name} as a key character who learns and grows
5. Make language appropriate for {request.child_age} year olds at {request.difficulty} reading level
6. Incorporate the theme of {request.theme} throughout the story
7. End with a clear moral lesson about {moral}
8. Create detailed, consistent image prompts in {style} style

EDUCATIONAL COMPANION FEATURES:
- Identify 5-8 key vocabulary words for this age group
- Create 3-4 thoughtful discussion questions for parents/teachers
- Suggest 1 creative activity related to the story theme

IMAGE PROMPT REQUIREMENTS:
- Start each image prompt with the character sheet details for consistency
- Include art style: "{style}"
- Make images safe, positive, and engaging for children
- Ensure diversity and inclusivity in character representations

{self._build_output_format(profile.page_count, style)}"""

        return StoryPrompt(
            prompt_text=prompt_text,
            system_text=SYSTEM_TEXT,
            page_count=profile.page_count,
            words_per_page=profile.words_per_page,
        )
