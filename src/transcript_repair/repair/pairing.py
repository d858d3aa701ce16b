"""
Tool-result pairing repair.

Strict providers reject a request if an assistant tool invocation is not
immediately followed by exactly one matching tool result, or if a result id
appears more than once anywhere in history. Session files can end up with
results displaced (after user turns), duplicated, or missing (crash,
interrupt). This module restores the invariant by:

- moving matching tool results directly after their assistant turn
- inserting synthetic error results for invocations with no result
- dropping duplicate results for the same id anywhere in the transcript
- dropping free-floating results that match no invocation in their span

Content that was interleaved with a tool round (user turns, notes) is
relocated after the repaired pair block, never deleted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from transcript_repair.core.types import (
    AssistantMessage,
    Message,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
)

logger = logging.getLogger(__name__)

SYNTHETIC_TOOL_RESULT_TEXT = (
    "[transcript-repair] missing tool result in session history; "
    "inserted synthetic error result for transcript repair."
)


def make_missing_tool_result(
    tool_call_id: str, tool_name: str | None = None
) -> ToolResultMessage:
    """Build the placeholder error result for an invocation with no result."""
    return ToolResultMessage(
        tool_call_id=tool_call_id,
        tool_name=tool_name or "unknown",
        content=[TextBlock(text=SYNTHETIC_TOOL_RESULT_TEXT)],
        is_error=True,
        timestamp=int(time.time() * 1000),
    )


@dataclass
class ToolUseRepairReport:
    """Result of repair_tool_use_result_pairing()."""

    messages: list[Message]
    added: list[ToolResultMessage] = field(default_factory=list)
    dropped_duplicate_count: int = 0
    dropped_orphan_count: int = 0
    moved: bool = False
    dropped_unpaired_tool_calls: int = 0


def _role(msg: Message) -> Any:
    return getattr(msg, "role", None)


def repair_tool_use_result_pairing(
    messages: list[Message],
    *,
    allow_synthetic_tool_results: bool = True,
) -> ToolUseRepairReport:
    """
    Restore adjacency and uniqueness between tool invocations and results.

    Single left-to-right scan. For each assistant turn with invocations, the
    span up to the next assistant turn is split into matching results (first
    per id wins), orphans (dropped) and remainder (re-emitted after the
    pair block, in order).

    Assistant turns that stopped with ``error`` or ``aborted`` are emitted
    unchanged and never paired: their invocations may be partial and
    providers reject result ids they never registered.

    Args:
        messages: Transcript to repair
        allow_synthetic_tool_results: When False, invocations with no
            result are removed from the assistant turn instead of being
            answered with a synthetic error result.

    Returns:
        Report whose ``messages`` is the input list itself when nothing
        changed.
    """
    out: list[Message] = []
    added: list[ToolResultMessage] = []
    seen: set[str] = set()
    dropped_duplicate_count = 0
    dropped_orphan_count = 0
    dropped_unpaired_tool_calls = 0
    moved = False

    i = 0
    total = len(messages)
    while i < total:
        msg = messages[i]
        i += 1
        role = _role(msg)

        if role == "toolResult":
            # Free-floating result outside any assistant span
            dropped_orphan_count += 1
            logger.debug(f"Dropped orphan tool result: {_result_id(msg)}")
            continue

        if not isinstance(msg, AssistantMessage) or msg.is_incomplete:
            out.append(msg)
            continue

        tool_calls = msg.tool_calls
        if not tool_calls:
            out.append(msg)
            continue

        call_ids = {call.id for call in tool_calls}
        span_results: dict[str, ToolResultMessage] = {}
        remainder: list[Message] = []

        while i < total and _role(messages[i]) != "assistant":
            nxt = messages[i]
            i += 1

            if _role(nxt) != "toolResult":
                remainder.append(nxt)
                continue

            result_id = _result_id(nxt)
            if result_id is None or result_id not in call_ids:
                dropped_orphan_count += 1
                logger.debug(f"Dropped tool result not owned by its turn: {result_id}")
                continue

            if result_id in seen or result_id in span_results:
                dropped_duplicate_count += 1
                logger.debug(f"Dropped duplicate tool result: {result_id}")
                continue

            if remainder:
                # Pulled up past content that preceded it
                moved = True
            span_results[result_id] = nxt

        unpaired = [call for call in tool_calls if call.id not in span_results]
        if unpaired and not allow_synthetic_tool_results:
            dropped_unpaired_tool_calls += len(unpaired)
            msg = _without_blocks(msg, unpaired)
            logger.debug(f"Dropped {len(unpaired)} tool call(s) with no result")

        if msg is not None:
            out.append(msg)

            for call in tool_calls:
                call_id = call.id
                if call_id in seen:
                    # Repeated invocation id; its result was already emitted
                    continue

                existing = span_results.get(call_id)
                if existing is not None:
                    out.append(existing)
                elif allow_synthetic_tool_results:
                    missing = make_missing_tool_result(call_id, call.name)
                    added.append(missing)
                    out.append(missing)
                    logger.debug(f"Inserted synthetic tool result: {call_id}")
                else:
                    continue
                seen.add(call_id)

        out.extend(remainder)

    changed = len(out) != total or any(a is not b for a, b in zip(out, messages))
    return ToolUseRepairReport(
        messages=out if changed else messages,
        added=added,
        dropped_duplicate_count=dropped_duplicate_count,
        dropped_orphan_count=dropped_orphan_count,
        moved=moved,
        dropped_unpaired_tool_calls=dropped_unpaired_tool_calls,
    )


def sanitize_tool_use_result_pairing(messages: list[Message]) -> list[Message]:
    """Transform form of repair_tool_use_result_pairing()."""
    return repair_tool_use_result_pairing(messages).messages


def _result_id(msg: Message) -> str | None:
    if isinstance(msg, ToolResultMessage):
        return msg.correlation_id
    return None


def _without_blocks(
    msg: AssistantMessage, blocks: list[ToolCallBlock]
) -> AssistantMessage | None:
    """Copy of ``msg`` minus ``blocks``, or None if nothing would remain."""
    dropped = {id(block) for block in blocks}
    kept = [block for block in msg.content if id(block) not in dropped]
    if not kept:
        return None
    return msg.model_copy(update={"content": kept})
