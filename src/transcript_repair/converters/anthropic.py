"""
Anthropic converter - repaired transcript to Anthropic MessageParam format.

Handles:
- UserMessage → user message (string or text blocks)
- AssistantMessage → assistant message with text + tool_use blocks
- ToolResultMessage → user message with a tool_result block
- Batching consecutive same-role messages (Anthropic requires alternating roles)

Run the repair pipeline first: Anthropic rejects tool_use blocks that are
not answered by a tool_result in the next user turn.
"""

from __future__ import annotations

import json
import logging
from typing import Any

try:
    from anthropic.types import (
        MessageParam,
        TextBlockParam,
        ToolResultBlockParam,
        ToolUseBlockParam,
    )
except ImportError as e:
    raise ImportError(
        "Anthropic dependencies not installed. "
        "Install with: uv add transcript-repair[anthropic]"
    ) from e

from transcript_repair.core.protocols import TranscriptConverter
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

# Type alias for Anthropic messages
AnthropicMessages = list[MessageParam]
ContentBlockParam = TextBlockParam | ToolUseBlockParam | ToolResultBlockParam


class AnthropicTranscriptConverter(TranscriptConverter[AnthropicMessages]):
    """
    Converts a repaired transcript to Anthropic message format.

    Output: [{"role": "user"|"assistant", "content": str | list[block]}]

    Note:
    - Opaque messages and blocks (thinking, images, unknown shapes) are skipped
    - Empty text blocks are skipped (Anthropic rejects them)
    """

    def convert(self, messages: list[Message]) -> AnthropicMessages:
        """Convert a repaired transcript to Anthropic format."""
        return to_anthropic_messages(messages)


def to_anthropic_messages(messages: list[Message]) -> AnthropicMessages:
    """
    Convert typed messages to Anthropic MessageParam format.

    Args:
        messages: Transcript after the repair pipeline

    Returns:
        List of Anthropic MessageParam, with consecutive same-role
        messages batched together.

    Example:
        >>> result = prepare_transcript(messages, policy)
        >>> params = to_anthropic_messages(result.messages)
        >>> # Ready for client.messages.create(messages=params)
    """
    converted: AnthropicMessages = []

    for msg in messages:
        if isinstance(msg, UserMessage):
            if isinstance(msg.content, str):
                converted.append({"role": "user", "content": msg.content})
                continue
            blocks = _text_blocks(msg.content)
            if blocks:
                converted.append({"role": "user", "content": blocks})

        elif isinstance(msg, AssistantMessage):
            assistant_blocks: list[ContentBlockParam] = []
            for block in msg.content:
                if isinstance(block, TextBlock) and block.text:
                    assistant_blocks.append({"type": "text", "text": block.text})
                elif isinstance(block, ToolCallBlock) and block.id:
                    tool_use_block: ToolUseBlockParam = {
                        "type": "tool_use",
                        "id": block.id,
                        "name": block.name or "unknown",
                        "input": _tool_input(block.arguments),
                    }
                    assistant_blocks.append(tool_use_block)
            if assistant_blocks:
                converted.append({"role": "assistant", "content": assistant_blocks})

        elif isinstance(msg, ToolResultMessage):
            if not msg.correlation_id:
                logger.debug("Skipping tool result without an id")
                continue
            content = (
                msg.content if isinstance(msg.content, str) else _text_blocks(msg.content)
            )
            tool_result_block: ToolResultBlockParam = {
                "type": "tool_result",
                "tool_use_id": msg.correlation_id,
                "content": content,
                "is_error": msg.is_error,
            }
            converted.append({"role": "user", "content": [tool_result_block]})

        else:
            logger.debug(f"Skipping opaque message: role={getattr(msg, 'role', None)!r}")

    return _batch_consecutive_messages(converted)


def _text_blocks(content: list[ContentBlock]) -> list[TextBlockParam]:
    return [
        {"type": "text", "text": block.text}
        for block in content
        if isinstance(block, TextBlock) and block.text
    ]


def _tool_input(arguments: Any) -> dict[str, Any]:
    """Anthropic requires a JSON object; JSON-encoded strings are decoded."""
    if isinstance(arguments, dict):
        return arguments
    if isinstance(arguments, str):
        try:
            decoded = json.loads(arguments)
        except json.JSONDecodeError:
            logger.warning(f"Failed to parse tool arguments: {arguments[:100]}")
            return {}
        if isinstance(decoded, dict):
            return decoded
    return {}


def _batch_consecutive_messages(
    messages: list[MessageParam],
) -> list[MessageParam]:
    """
    Batch consecutive same-role messages into single messages.

    Anthropic requires alternating user/assistant roles. This merges
    consecutive messages with the same role into a single message
    with multiple content blocks.
    """
    if not messages:
        return messages

    batched: list[MessageParam] = []
    current: MessageParam | None = None

    for msg in messages:
        if current is None or current["role"] != msg["role"]:
            if current is not None:
                batched.append(current)
            current = {"role": msg["role"], "content": msg["content"]}
            continue

        # Same role - normalize both sides to block lists and merge
        current = {
            "role": current["role"],
            "content": [*_as_blocks(current["content"]), *_as_blocks(msg["content"])],
        }

    if current is not None:
        batched.append(current)

    return batched


def _as_blocks(content: Any) -> list[Any]:
    if isinstance(content, str):
        text_block: TextBlockParam = {"type": "text", "text": content}
        return [text_block]
    return list(content)
