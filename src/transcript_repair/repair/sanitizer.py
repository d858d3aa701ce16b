"""Tool-call input sanitizer. Sync, unit-testable."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from transcript_repair.core.types import AssistantMessage, Message, ToolCallBlock

logger = logging.getLogger(__name__)


@dataclass
class ToolCallInputRepairReport:
    """Result of repair_tool_call_inputs()."""

    messages: list[Message]
    dropped_tool_calls: int = 0
    dropped_assistant_messages: int = 0


def repair_tool_call_inputs(messages: list[Message]) -> ToolCallInputRepairReport:
    """
    Drop tool invocations that carry no arguments payload.

    A tool call block is kept only when ``input`` or ``arguments`` holds a
    non-null value. An assistant message emptied by the drop is removed
    entirely.

    Args:
        messages: Transcript to sanitize

    Returns:
        Report whose ``messages`` is the input list itself when nothing
        was dropped.
    """
    dropped_tool_calls = 0
    dropped_assistant_messages = 0
    changed = False
    out: list[Message] = []

    for msg in messages:
        if not isinstance(msg, AssistantMessage):
            out.append(msg)
            continue

        kept = [
            block
            for block in msg.content
            if not (isinstance(block, ToolCallBlock) and not block.has_arguments)
        ]
        dropped_in_message = len(msg.content) - len(kept)

        if not dropped_in_message:
            out.append(msg)
            continue

        changed = True
        dropped_tool_calls += dropped_in_message
        logger.debug(f"Dropped {dropped_in_message} tool call(s) without input")

        if not kept:
            dropped_assistant_messages += 1
            continue
        out.append(msg.model_copy(update={"content": kept}))

    return ToolCallInputRepairReport(
        messages=out if changed else messages,
        dropped_tool_calls=dropped_tool_calls,
        dropped_assistant_messages=dropped_assistant_messages,
    )


def sanitize_tool_call_inputs(messages: list[Message]) -> list[Message]:
    """Transform form of repair_tool_call_inputs()."""
    return repair_tool_call_inputs(messages).messages
