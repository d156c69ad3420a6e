"""
Image generation configuration for the Storybook Generator.

Page illustrations come from Gemini image generation. Pages that fail
get a placeholder of PLACEHOLDER size instead.
"""

import base64
import os

from dotenv import load_dotenv
from google import genai
from google.genai.types import GenerateContentConfig, Modality

# Load environment variables from .env file
load_dotenv()

IMAGE_CONSTANTS = {
    "model": "gemini-2.5-flash-image",
    "max_concurrent_requests": 6,  # Pages illustrated at once per story
    "placeholder_height": 400,
    "placeholder_width": 600,
}


def get_image_client() -> genai.Client:
    """
    Get the Gemini client for page illustrations.

    Raises:
        ValueError: If GOOGLE_API_KEY is not set
    """
    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise ValueError("GOOGLE_API_KEY not found in environment. Set it in .env file.")
    return genai.Client(api_key=api_key)


def get_image_model() -> str:
    return IMAGE_CONSTANTS["model"]


def get_image_config() -> GenerateContentConfig:
    # The model may answer with commentary alongside the image
    return GenerateContentConfig(response_modalities=[Modality.TEXT, Modality.IMAGE])


def _inline_image_bytes(part) -> bytes:
    data = part.inline_data.data
    return base64.b64decode(data) if isinstance(data, str) else data


def extract_image_from_response(response) -> bytes:
    """
    Return the first inline image in a generate_content response.

    Raises:
        ValueError: If the response has no candidates or no image part
    """
    if not response.candidates:
        raise ValueError("No candidates in response")

    parts = response.candidates[0].content.parts or []
    for part in parts:
        if getattr(part, "inline_data", None):
            return _inline_image_bytes(part)

    raise ValueError("No image found in response")
