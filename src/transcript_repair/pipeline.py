"""
Transcript repair pipeline.

Applies the repair transforms in a fixed order, gated by a TranscriptPolicy,
immediately before a transcript is handed to a model API client:

    sanitize tool call inputs   (always)
    repair tool result pairing  (policy.repair_tool_use_result_pairing)
    split parallel tool calls   (policy.split_parallel_tool_calls, after pairing)
    textify tool call rounds    (policy.textify_tool_call_history)

Example:
    pipeline = TranscriptPipeline.for_model(
        "openai-responses", "github-copilot", "gemini-2.5-pro"
    )
    result = pipeline.run(messages)
    client.send(result.messages)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from transcript_repair.converters.agent_messages import dump_transcript, parse_transcript
from transcript_repair.core.types import Message, PolicyConfig, ToolResultMessage
from transcript_repair.policy import TranscriptPolicy, resolve_transcript_policy
from transcript_repair.repair import (
    repair_tool_call_inputs,
    repair_tool_use_result_pairing,
    split_parallel_tool_calls,
    textify_tool_call_rounds,
)

logger = logging.getLogger(__name__)


@dataclass
class TranscriptRepairResult:
    """Final transcript plus the audit counts of every stage that ran."""

    messages: list[Message]
    changed: bool = False
    dropped_tool_calls: int = 0
    dropped_assistant_messages: int = 0
    added: list[ToolResultMessage] = field(default_factory=list)
    dropped_duplicate_count: int = 0
    dropped_orphan_count: int = 0
    moved: bool = False
    dropped_unpaired_tool_calls: int = 0
    split: bool = False
    textified: bool = False

    @property
    def lost_count(self) -> int:
        """Items removed from the transcript by any stage."""
        return (
            self.dropped_tool_calls
            + self.dropped_assistant_messages
            + self.dropped_duplicate_count
            + self.dropped_orphan_count
            + self.dropped_unpaired_tool_calls
        )


class TranscriptPipeline:
    """
    Runs the repair transforms for one policy.

    Stateless between runs; one instance may serve many transcripts.

    Pairing repair always answers unanswered invocations with a synthetic
    error result. Pass ``drop_unpaired_tool_calls=True`` to remove such
    invocations instead.
    """

    def __init__(self, policy: TranscriptPolicy, drop_unpaired_tool_calls: bool = False):
        self.policy = policy
        self.drop_unpaired_tool_calls = drop_unpaired_tool_calls

    @classmethod
    def for_model(
        cls,
        model_api: str | None,
        provider: str | None,
        model_id: str | None,
        config: PolicyConfig | None = None,
        drop_unpaired_tool_calls: bool = False,
    ) -> "TranscriptPipeline":
        """Build a pipeline from the resolved policy for a model."""
        return cls(
            resolve_transcript_policy(model_api, provider, model_id, config),
            drop_unpaired_tool_calls=drop_unpaired_tool_calls,
        )

    def run(self, messages: list[Message]) -> TranscriptRepairResult:
        """
        Repair a transcript.

        Returns:
            TranscriptRepairResult; ``messages`` is the input list itself
            when no stage changed anything.
        """
        policy = self.policy
        current = messages

        sanitized = repair_tool_call_inputs(current)
        current = sanitized.messages
        result = TranscriptRepairResult(
            messages=current,
            dropped_tool_calls=sanitized.dropped_tool_calls,
            dropped_assistant_messages=sanitized.dropped_assistant_messages,
        )

        if policy.repair_tool_use_result_pairing:
            paired = repair_tool_use_result_pairing(
                current,
                allow_synthetic_tool_results=not self.drop_unpaired_tool_calls,
            )
            current = paired.messages
            result.added = paired.added
            result.dropped_duplicate_count = paired.dropped_duplicate_count
            result.dropped_orphan_count = paired.dropped_orphan_count
            result.moved = paired.moved
            result.dropped_unpaired_tool_calls = paired.dropped_unpaired_tool_calls

            if policy.split_parallel_tool_calls:
                split = split_parallel_tool_calls(current)
                result.split = split is not current
                current = split

        if policy.textify_tool_call_history:
            textified = textify_tool_call_rounds(current)
            result.textified = textified is not current
            current = textified

        result.messages = current
        result.changed = current is not messages
        self._log_summary(result, len(messages))
        return result

    def _log_summary(self, result: TranscriptRepairResult, input_count: int) -> None:
        if not result.changed:
            return

        logger.info(
            f"Repaired transcript: {input_count} -> {len(result.messages)} messages "
            f"(moved={result.moved}, split={result.split}, textified={result.textified})"
        )
        if result.added or result.lost_count:
            logger.warning(
                f"Transcript repair lost or synthesized content: "
                f"synthetic_results={len(result.added)}, "
                f"dropped_tool_calls={result.dropped_tool_calls}, "
                f"dropped_assistant_messages={result.dropped_assistant_messages}, "
                f"dropped_duplicates={result.dropped_duplicate_count}, "
                f"dropped_orphans={result.dropped_orphan_count}, "
                f"dropped_unpaired_tool_calls={result.dropped_unpaired_tool_calls}"
            )


def prepare_transcript(
    messages: list[Message], policy: TranscriptPolicy
) -> TranscriptRepairResult:
    """Run the repair pipeline for ``policy`` over typed messages."""
    return TranscriptPipeline(policy).run(messages)


def prepare_raw_transcript(
    raw: Iterable[Any], policy: TranscriptPolicy
) -> list[Any]:
    """
    Run the repair pipeline over raw transcript dicts.

    Entries untouched by the pipeline are returned as the original objects.
    """
    raw_list = list(raw)
    parsed = parse_transcript(raw_list)
    result = prepare_transcript(parsed, policy)
    if not result.changed:
        return raw_list

    originals = {id(msg): item for msg, item in zip(parsed, raw_list)}
    out: list[Any] = []
    for msg in result.messages:
        if id(msg) in originals:
            out.append(originals[id(msg)])
        else:
            out.extend(dump_transcript([msg]))
    return out
