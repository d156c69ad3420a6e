"""Markers shared by the unit and integration suites.

Integration tests call the real text and image providers and are skipped
when the matching API key is not set (see tests/integration/conftest.py).
"""

STORYBOOK_MARKERS = (
    ("requires_google_api", "calls Gemini for text or page illustrations; needs GOOGLE_API_KEY"),
    ("requires_llm_api", "calls a dspy text model; needs GOOGLE_, ANTHROPIC_ or OPENAI_API_KEY"),
    ("slow", "makes live provider calls and may take a minute per story"),
)


def pytest_configure(config):
    for name, description in STORYBOOK_MARKERS:
        config.addinivalue_line("markers", f"{name}: {description}")
