"""
Agent message converter - raw transcript dicts to the typed message model and back.

This is the single boundary where loosely-shaped session history becomes
typed messages:
- Role dispatch ("user" | "assistant" | "toolResult")
- Tool invocation spellings (toolCall/toolUse/functionCall) and payload keys
  (input/arguments) normalized into ToolCallBlock
- Anything malformed is wrapped in OpaqueMessage/OpaqueBlock and survives a
  round trip unchanged

The converter never raises on message content.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from transcript_repair.core.types import (
    AssistantMessage,
    ContentBlock,
    Message,
    OpaqueBlock,
    OpaqueMessage,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
    UserMessage,
)

logger = logging.getLogger(__name__)

_MODELS_BY_ROLE: dict[str, type[UserMessage | AssistantMessage | ToolResultMessage]] = {
    "user": UserMessage,
    "assistant": AssistantMessage,
    "toolResult": ToolResultMessage,
}


def parse_message(raw: Any) -> Message:
    """
    Parse one raw transcript entry.

    Args:
        raw: A dict shaped like a user, assistant or toolResult message.
            Already-typed messages are returned as-is.

    Returns:
        The typed message, or OpaqueMessage if the entry is not recognizable.
    """
    if isinstance(raw, (UserMessage, AssistantMessage, ToolResultMessage, OpaqueMessage)):
        return raw
    if not isinstance(raw, dict):
        logger.warning(f"Skipping non-object transcript entry: {type(raw).__name__}")
        return OpaqueMessage(raw=raw)

    role = raw.get("role")
    model = _MODELS_BY_ROLE.get(role) if isinstance(role, str) else None
    if model is None:
        logger.debug(f"Passing through message with unknown role: {role!r}")
        return OpaqueMessage(raw=raw)

    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            f"Malformed {role} message passed through unchanged: "
            f"{e.error_count()} validation error(s)"
        )
        return OpaqueMessage(raw=raw)


def parse_transcript(raw: Iterable[Any]) -> list[Message]:
    """Parse a raw transcript into typed messages, preserving order."""
    return [parse_message(item) for item in raw]


def dump_block(block: ContentBlock) -> Any:
    """Dump one content block back to its wire shape."""
    if isinstance(block, ToolCallBlock):
        return block.to_wire()
    if isinstance(block, TextBlock):
        return block.model_dump(by_alias=True, exclude_none=True)
    if isinstance(block, OpaqueBlock):
        return block.raw
    return block


def dump_message(msg: Message) -> Any:
    """
    Dump one message back to its wire shape.

    Field names use the camelCase wire spelling (toolCallId, isError,
    stopReason) and tool invocation blocks keep the type and payload key
    they arrived with.
    """
    if isinstance(msg, OpaqueMessage):
        return msg.raw

    data = msg.model_dump(by_alias=True, exclude_none=True, exclude={"content"})
    content = msg.content
    if isinstance(content, list):
        data["content"] = [dump_block(block) for block in content]
    else:
        data["content"] = content
    return data


def dump_transcript(messages: Iterable[Message]) -> list[Any]:
    """Dump typed messages back to raw transcript dicts."""
    return [dump_message(msg) for msg in messages]
