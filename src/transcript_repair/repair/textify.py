"""
Tool-call textification.

Converts tool call rounds (assistant tool call blocks + matching tool
results) into plain text so that proxied endpoints which cannot parse
structured tool-call history (e.g. Gemini behind GitHub Copilot) still see
the conversational context.

For each assistant message that contains tool call blocks:
- The tool call blocks are replaced with one text summary block.
- Tool results belonging to those calls become user messages holding the
  result text, placed right after the assistant message.
- Non-tool-call content blocks in the assistant message are preserved.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from transcript_repair.core.types import (
    AssistantMessage,
    ContentBlock,
    Message,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
    UserMessage,
)

logger = logging.getLogger(__name__)

TEXTIFY_MAX_RESULT_CHARS = 800
TRUNCATION_MARKER = "… (truncated)"


def textify_tool_call_rounds(messages: list[Message]) -> list[Message]:
    """
    Flatten structured tool rounds into text turns.

    Each invocation renders as ``[Called tool <name>(<json-args>)]`` and each
    matched result as a user message ``[Tool <name> result: <text>]``.
    Results are matched by id across the whole transcript (first occurrence
    wins) and are not emitted a second time where they originally stood.

    Returns:
        The input list itself if no assistant message had tool calls.
    """
    changed = False
    out: list[Message] = []

    # Collect all tool results keyed by id so we can match them
    tool_result_by_id: dict[str, ToolResultMessage] = {}
    for msg in messages:
        if isinstance(msg, ToolResultMessage):
            result_id = msg.correlation_id
            if result_id and result_id not in tool_result_by_id:
                tool_result_by_id[result_id] = msg

    # Ids whose results were already inlined
    consumed: set[str] = set()

    for msg in messages:
        if isinstance(msg, ToolResultMessage):
            if msg.correlation_id in consumed:
                changed = True
                continue
            out.append(msg)
            continue

        if not isinstance(msg, AssistantMessage):
            out.append(msg)
            continue

        tool_calls: list[ToolCallBlock] = []
        other_blocks: list[ContentBlock] = []
        for block in msg.content:
            if isinstance(block, ToolCallBlock) and block.id:
                tool_calls.append(block)
            else:
                other_blocks.append(block)

        if not tool_calls:
            out.append(msg)
            continue

        changed = True
        summary_lines: list[str] = []
        result_messages: list[Message] = []

        for call in tool_calls:
            name = call.name or "unknown_tool"
            summary_lines.append(f"[Called tool {name}({format_arguments(call.arguments)})]")

            result = tool_result_by_id.get(call.id)
            if result is not None:
                consumed.add(call.id)
                result_messages.append(
                    UserMessage(
                        content=f"[Tool {name} result: {extract_tool_result_text(result)}]",
                        timestamp=(
                            result.timestamp
                            if result.timestamp is not None
                            else int(time.time() * 1000)
                        ),
                    )
                )

        logger.debug(f"Textified {len(tool_calls)} tool call(s)")
        summary = TextBlock(text="\n".join(summary_lines))
        out.append(msg.model_copy(update={"content": [*other_blocks, summary]}))
        out.extend(result_messages)

    return out if changed else messages


def format_arguments(arguments: Any) -> str:
    """Compact JSON for a tool call payload; ``{}`` when absent."""
    if not arguments and not isinstance(arguments, (dict, list)):
        return "{}"
    return json.dumps(
        arguments, separators=(",", ":"), ensure_ascii=False, default=str
    )


def extract_tool_result_text(msg: ToolResultMessage) -> str:
    """Textual representation of a tool result, truncated for textification."""
    content = msg.content
    if isinstance(content, str):
        return truncate_tool_result_text(content)

    texts = [block.text for block in content if isinstance(block, TextBlock)]
    return truncate_tool_result_text("\n".join(texts) or "(no content)")


def truncate_tool_result_text(text: str) -> str:
    """Keep the first TEXTIFY_MAX_RESULT_CHARS characters, marking the cut."""
    if len(text) <= TEXTIFY_MAX_RESULT_CHARS:
        return text
    return text[:TEXTIFY_MAX_RESULT_CHARS] + TRUNCATION_MARKER
