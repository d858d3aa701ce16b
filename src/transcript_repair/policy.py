"""
Transcript policy resolution.

Decides, per (model API, provider, model id), which repairs a transcript
needs before it is sent. Pure and total: unknown combinations resolve to
the all-false default.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

from transcript_repair.core.types import PolicyConfig

_DEFAULT_CONFIG = PolicyConfig()


@dataclass(frozen=True)
class TranscriptPolicy:
    """Repair/degrade switches consumed by the pipeline driver."""

    textify_tool_call_history: bool = False
    repair_tool_use_result_pairing: bool = False
    allow_synthetic_tool_results: bool = False
    split_parallel_tool_calls: bool = False

    def to_dict(self) -> dict[str, bool]:
        """Wire (camelCase) field names."""
        data = asdict(self)
        return {
            "textifyToolCallHistory": data["textify_tool_call_history"],
            "repairToolUseResultPairing": data["repair_tool_use_result_pairing"],
            "allowSyntheticToolResults": data["allow_synthetic_tool_results"],
            "splitParallelToolCalls": data["split_parallel_tool_calls"],
        }


def resolve_transcript_policy(
    model_api: str | None,
    provider: str | None,
    model_id: str | None,
    config: PolicyConfig | None = None,
) -> TranscriptPolicy:
    """
    Resolve the transcript policy for a model.

    Rules, first match wins:
    1. Direct Google Generative AI provider: strict pairing is enforced
       natively, so repair pairing; structured tool calls are understood,
       so no textification.
    2. GitHub Copilot relaying a Gemini model: the upstream rejects native
       tool-call history, so enable every repair.
    3. Aggregators that special-case Gemini themselves (OpenRouter): no
       repairs, to avoid double handling.
    4. Anything else: default (all false).

    Args:
        model_api: API family (e.g. "openai-responses"); informational
        provider: Provider id (e.g. "github-copilot")
        model_id: Model id (e.g. "gemini-2.5-pro")
        config: Provider tables; defaults to PolicyConfig()

    Returns:
        TranscriptPolicy
    """
    config = config or _DEFAULT_CONFIG
    provider_key = _normalize(provider)
    model_key = _normalize(model_id)

    if provider_key in config.google_providers:
        return TranscriptPolicy(repair_tool_use_result_pairing=True)

    if provider_key in config.copilot_providers and is_gemini_model(model_key, config):
        return TranscriptPolicy(
            textify_tool_call_history=True,
            repair_tool_use_result_pairing=True,
            allow_synthetic_tool_results=True,
            split_parallel_tool_calls=True,
        )

    if provider_key in config.gemini_aggregator_providers:
        return TranscriptPolicy()

    return TranscriptPolicy()


def is_gemini_model(model_id: str | None, config: PolicyConfig | None = None) -> bool:
    """True if ``model_id`` belongs to the Gemini family."""
    if not model_id:
        return False
    pattern = (config or _DEFAULT_CONFIG).gemini_model_pattern
    return re.search(pattern, model_id.strip(), re.IGNORECASE) is not None


def _normalize(value: str | None) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()
