# Story text
from .prompt_builder import PromptBuilder, build_character_sheet
from .response_parser import ResponseParser, ParseResult
from .fallback_synthesizer import FallbackSynthesizer

# Illustration
from .page_illustrator import PageIllustrator, placeholder_image_url

# External collaborators
from .text_generator import TextGenerator, DspyTextGenerator
from .image_generator import ImageGenerator, GeminiImageGenerator

__all__ = [
    # Story text
    "PromptBuilder",
    "build_character_sheet",
    "ResponseParser",
    "ParseResult",
    "FallbackSynthesizer",
    # Illustration
    "PageIllustrator",
    "placeholder_image_url",
    # External collaborators
    "TextGenerator",
    "DspyTextGenerator",
    "ImageGenerator",
    "GeminiImageGenerator",
]
