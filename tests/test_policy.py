"""Tests for transcript policy resolution."""

import pytest

from transcript_repair.core.types import PolicyConfig
from transcript_repair.policy import (
    TranscriptPolicy,
    is_gemini_model,
    resolve_transcript_policy,
)


class TestTextifyToolCallHistory:
    """Tests for the textify flag."""

    @pytest.mark.parametrize("model_id", ["gemini-3-flash-preview", "gemini-2.5-pro"])
    def test_enabled_for_copilot_gemini(self, model_id):
        """GitHub Copilot relaying Gemini textifies history."""
        policy = resolve_transcript_policy("openai-responses", "github-copilot", model_id)

        assert policy.textify_tool_call_history is True

    def test_disabled_for_copilot_non_gemini(self):
        """Copilot with an OpenAI model keeps structured history."""
        policy = resolve_transcript_policy("openai-responses", "github-copilot", "gpt-4o")

        assert policy.textify_tool_call_history is False

    def test_disabled_for_openai(self):
        """Plain OpenAI never textifies."""
        policy = resolve_transcript_policy("openai-responses", "openai", "gpt-4o")

        assert policy.textify_tool_call_history is False

    def test_disabled_for_direct_google(self):
        """Direct Google API understands structured tool calls."""
        policy = resolve_transcript_policy(
            "google-generative-ai", "google-generative-ai", "gemini-3-flash-preview"
        )

        assert policy.textify_tool_call_history is False

    def test_disabled_for_openrouter_gemini(self):
        """OpenRouter handles Gemini itself."""
        policy = resolve_transcript_policy(
            "openai-completions", "openrouter", "google/gemini-2.5-pro"
        )

        assert policy.textify_tool_call_history is False


class TestFullPolicies:
    """Tests for the complete flag set per rule."""

    def test_direct_google_repairs_pairing_only(self):
        """Rule 1: only pairing repair."""
        policy = resolve_transcript_policy(
            "google-generative-ai", "google", "gemini-2.5-pro"
        )

        assert policy == TranscriptPolicy(repair_tool_use_result_pairing=True)

    def test_copilot_gemini_enables_everything(self):
        """Rule 2: every flag on."""
        policy = resolve_transcript_policy("openai-responses", "github-copilot", "gemini-2.5-pro")

        assert policy == TranscriptPolicy(
            textify_tool_call_history=True,
            repair_tool_use_result_pairing=True,
            allow_synthetic_tool_results=True,
            split_parallel_tool_calls=True,
        )

    def test_openrouter_all_false(self):
        """Rule 3: aggregator avoids double repair."""
        policy = resolve_transcript_policy(
            "openai-completions", "openrouter", "google/gemini-2.5-pro"
        )

        assert policy == TranscriptPolicy()

    @pytest.mark.parametrize(
        "model_api, provider, model_id",
        [
            ("anthropic-messages", "anthropic", "claude-sonnet-4"),
            ("openai-completions", "some-new-provider", "gemini-2.5-pro"),
            (None, None, None),
            ("", "", ""),
        ],
    )
    def test_unknown_defaults_to_all_false(self, model_api, provider, model_id):
        """Rule 4: anything else, including missing input, is the default."""
        assert resolve_transcript_policy(model_api, provider, model_id) == TranscriptPolicy()

    def test_provider_match_is_case_insensitive(self):
        """Provider ids are trimmed and lower-cased."""
        policy = resolve_transcript_policy("openai-responses", " GitHub-Copilot ", "Gemini-2.5-Pro")

        assert policy.textify_tool_call_history is True

    def test_to_dict_uses_wire_names(self):
        """to_dict() produces the camelCase field names."""
        policy = TranscriptPolicy(repair_tool_use_result_pairing=True)

        assert policy.to_dict() == {
            "textifyToolCallHistory": False,
            "repairToolUseResultPairing": True,
            "allowSyntheticToolResults": False,
            "splitParallelToolCalls": False,
        }


class TestConfigOverrides:
    """Tests for custom provider tables."""

    def test_custom_google_provider(self):
        """Additional Google providers follow rule 1."""
        config = PolicyConfig(google_providers=("google-vertex",))

        policy = resolve_transcript_policy("google-vertex", "google-vertex", "gemini-2.5-pro", config)

        assert policy.repair_tool_use_result_pairing is True

    def test_custom_model_pattern(self):
        """The Gemini pattern decides rule 2."""
        config = PolicyConfig(gemini_model_pattern=r"^gemma")

        assert is_gemini_model("gemma-3", config) is True
        assert is_gemini_model("gemini-2.5-pro", config) is False


class TestIsGeminiModel:
    """Tests for the default Gemini pattern."""

    @pytest.mark.parametrize(
        "model_id, expected",
        [
            ("gemini-2.5-pro", True),
            ("google/gemini-2.5-pro", True),
            ("models:gemini-pro", True),
            ("GEMINI-3-FLASH-PREVIEW", True),
            ("gpt-4o", False),
            ("not-gemini", False),
            ("", False),
            (None, False),
        ],
    )
    def test_pattern(self, model_id, expected):
        """Gemini matches at the start or after a path separator."""
        assert is_gemini_model(model_id) is expected
