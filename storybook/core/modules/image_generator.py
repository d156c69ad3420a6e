"""
Module for generating a single page illustration with Gemini.

The illustration prompt is sent together with the character sheet and,
when the user uploaded one, the reference image as a visual anchor.
Generated bytes are written to the images directory and served back
through the API's /images route.
"""

import asyncio
import base64
import binascii
import logging
import uuid
from io import BytesIO
from pathlib import Path
from typing import Optional, Protocol

from PIL import Image

from storybook.config import get_image_client, get_image_model, get_image_config, extract_image_from_response
from ..types import ImageRequest

logger = logging.getLogger(__name__)


class ImageGenerator(Protocol):
    """Anything that can turn one ImageRequest into an image URL."""

    async def generate(self, request: ImageRequest) -> str:
        ...


def decode_reference_image(data: Optional[str]) -> Optional[Image.Image]:
    """
    Decode a base64 or data-URL reference image into a PIL Image.

    Returns None if the data is missing or not a readable image.
    """
    if not data:
        return None

    # Strip "data:image/png;base64," style prefixes
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]

    try:
        image = Image.open(BytesIO(base64.b64decode(data)))
        image.load()
        return image
    except (binascii.Error, ValueError, OSError, Image.DecompressionBombError) as e:
        logger.warning(f"Ignoring unreadable reference image: {e}")
        return None


class GeminiImageGenerator:
    """
    Generate page illustrations using Gemini image generation.

    Every page of a story carries the same reference image, so the last
    decoded one is kept and reused while the data string is unchanged.

    Args:
        images_dir: Directory where generated images are written
        url_prefix: URL path under which images_dir is served
    """

    def __init__(self, images_dir: Path, url_prefix: str = "/images"):
        self.client = get_image_client()
        self.model = get_image_model()
        self.config = get_image_config()
        self.images_dir = Path(images_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self._reference_lock = asyncio.Lock()
        self._reference_data: Optional[str] = None
        self._reference_image: Optional[Image.Image] = None

    async def _load_reference(self, data: Optional[str]) -> Optional[Image.Image]:
        """Decode the reference image off the event loop, once per distinct upload."""
        if not data:
            return None
        async with self._reference_lock:
            if data != self._reference_data:
                self._reference_image = await asyncio.to_thread(decode_reference_image, data)
                self._reference_data = data
            return self._reference_image

    def _build_scene_prompt(self, request: ImageRequest) -> str:
        """Build the text part of the multimodal prompt."""
        style = request.style or "children's book illustration, warm colors, soft lighting"
        character = request.character_sheet or "Keep every character's appearance consistent."

        return f"""Generate a children's picture book illustration.

SCENE DESCRIPTION:
{request.prompt}

CHARACTER SHEET:
{character}

STYLE: {style}

REQUIREMENTS:
- Single cohesive illustration suitable for a picture book page
- Characters should be expressive and appealing to children
- Warm, inviting color palette
- Age-appropriate content
- No text or words in the image"""

    def _build_contents(self, request: ImageRequest, reference: Optional[Image.Image]) -> list:
        """Build multimodal contents list for image generation."""
        contents = []

        if reference is not None:
            contents.append(reference)
            contents.append(
                "INSPIRATION IMAGE: Use elements, colors, or themes from this image where appropriate."
            )

        contents.append(self._build_scene_prompt(request))
        return contents

    def _save_image(self, image_bytes: bytes, page_number: Optional[int]) -> str:
        """Write image bytes to disk and return the URL they are served from."""
        self.images_dir.mkdir(parents=True, exist_ok=True)
        prefix = f"page_{page_number:02d}_" if page_number is not None else ""
        filename = f"{prefix}{uuid.uuid4().hex}.png"
        (self.images_dir / filename).write_bytes(image_bytes)
        return f"{self.url_prefix}/{filename}"

    async def generate(self, request: ImageRequest) -> str:
        """
        Generate an illustration for a single page.

        Returns:
            URL of the stored image

        Raises:
            ValueError: If the response contains no image
        """
        reference = await self._load_reference(request.reference_image)
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=self._build_contents(request, reference),
            config=self.config,
        )
        image_bytes = extract_image_from_response(response)
        return await asyncio.to_thread(self._save_image, image_bytes, request.page_number)
