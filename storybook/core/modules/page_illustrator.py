"""
Module for illustrating every page of a story concurrently.

One image request is issued per page. A failed page gets a placeholder
URL built from its image prompt instead of failing the batch, and each
result is matched back to its page by index, so completion order never
changes page order.
"""

import asyncio
import logging
from typing import Callable, Optional
from urllib.parse import quote

from storybook.config import IMAGE_CONSTANTS
from ..types import ImageRequest, StoryPage
from .image_generator import ImageGenerator

logger = logging.getLogger(__name__)

# (stage, detail, completed, total)
ProgressCallback = Callable[[str, str, int, int], None]

# Characters encodeURIComponent leaves unescaped
URI_COMPONENT_SAFE = "-_.!~*'()"


def placeholder_image_url(image_prompt: str) -> str:
    """Deterministic placeholder reference that still describes the page."""
    height = IMAGE_CONSTANTS["placeholder_height"]
    width = IMAGE_CONSTANTS["placeholder_width"]
    query = quote(image_prompt, safe=URI_COMPONENT_SAFE)
    return f"/placeholder.svg?height={height}&width={width}&query={query}"


class PageIllustrator:
    """
    Attach an illustration URL to every page of a story.

    Args:
        image_generator: Collaborator that produces one image URL per request
        max_concurrent: Upper bound on image requests in flight at once
    """

    def __init__(
        self,
        image_generator: ImageGenerator,
        max_concurrent: int = IMAGE_CONSTANTS["max_concurrent_requests"],
    ):
        self.image_generator = image_generator
        self.max_concurrent = max(1, max_concurrent)

    async def illustrate_page(
        self,
        page: StoryPage,
        art_style: str,
        character_sheet: Optional[str] = None,
        reference_image: Optional[str] = None,
    ) -> StoryPage:
        """
        Illustrate one page, substituting a placeholder on any failure.

        Single attempt, no retry.
        """
        request = ImageRequest(
            prompt=page.image_prompt,
            style=art_style,
            character_sheet=character_sheet,
            reference_image=reference_image,
            page_number=page.page_number,
        )
        try:
            image_url = await self.image_generator.generate(request)
        except Exception as e:
            logger.warning(
                f"Image generation failed for page {page.page_number}: {e}",
                extra={"page_number": page.page_number, "error_type": type(e).__name__},
            )
            return page.with_image(placeholder_image_url(page.image_prompt))

        if not image_url:
            logger.warning(
                f"Image generation returned no URL for page {page.page_number}",
                extra={"page_number": page.page_number},
            )
            return page.with_image(placeholder_image_url(page.image_prompt))

        return page.with_image(image_url)

    async def illustrate_story(
        self,
        pages: list[StoryPage],
        art_style: str,
        character_sheet: Optional[str] = None,
        reference_image: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[StoryPage]:
        """
        Illustrate all pages concurrently and wait for every one to settle.

        Args:
            pages: Story pages with image prompts
            art_style: Art style passed to every image request
            character_sheet: Character consistency context for every request
            reference_image: Optional uploaded reference image
            on_progress: Optional callback(stage, detail, completed, total)

        Returns:
            New list of pages, same order, each with image_url set
        """
        total_pages = len(pages)
        if total_pages == 0:
            return []

        semaphore = asyncio.Semaphore(min(total_pages, self.max_concurrent))
        completed = 0

        if on_progress:
            on_progress("illustrations", f"Generating {total_pages} page illustrations...", 0, total_pages)

        async def illustrate_one(page: StoryPage) -> StoryPage:
            nonlocal completed
            async with semaphore:
                result = await self.illustrate_page(page, art_style, character_sheet, reference_image)
            completed += 1
            if on_progress:
                on_progress("illustrations", f"Illustrated page {page.page_number}", completed, total_pages)
            return result

        # gather returns results in argument order regardless of completion order
        return list(await asyncio.gather(*(illustrate_one(page) for page in pages)))
