"""Unit tests for text model provider selection."""

import pytest

from storybook.config.llm import TEXT_PROVIDERS, get_inference_lm, get_inference_model_name


@pytest.fixture
def no_provider_keys(monkeypatch):
    for provider in TEXT_PROVIDERS:
        monkeypatch.delenv(provider.env_var, raising=False)
    return monkeypatch


class TestProviderSelection:

    def test_no_keys_raises(self, no_provider_keys):
        with pytest.raises(ValueError, match="No API key found"):
            get_inference_lm()

    def test_no_keys_model_name(self, no_provider_keys):
        assert get_inference_model_name() == "unknown"

    @pytest.mark.parametrize(
        "env_var,model_name",
        [
            ("GOOGLE_API_KEY", "gemini-2.5-pro"),
            ("ANTHROPIC_API_KEY", "claude-sonnet-4-20250514"),
            ("OPENAI_API_KEY", "gpt-4.1"),
        ],
    )
    def test_single_key(self, no_provider_keys, env_var, model_name):
        no_provider_keys.setenv(env_var, "test-key")
        assert get_inference_model_name() == model_name

    def test_google_wins_when_all_keys_set(self, no_provider_keys):
        for provider in TEXT_PROVIDERS:
            no_provider_keys.setenv(provider.env_var, "test-key")

        lm = get_inference_lm()

        assert lm.model == "gemini/gemini-2.5-pro"
