"""Message factories for unit tests.

This module provides factory functions to build typed transcript messages
without spelling out every field in each test.

Defaults mirror a typical session: tool calls use the ``toolCall`` spelling
with an ``arguments`` payload, results carry a single text block.
"""

from typing import Any, Optional

from transcript_repair.core.types import (
    AssistantMessage,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
    UserMessage,
)


class MessageFactory:
    """Factory for creating typed transcript messages."""

    @staticmethod
    def user(content: Any = "hello", timestamp: Optional[int] = 1) -> UserMessage:
        """Create a user message."""
        return UserMessage(content=content, timestamp=timestamp)

    @staticmethod
    def text(text: str) -> TextBlock:
        """Create a text content block."""
        return TextBlock(text=text)

    @staticmethod
    def tool_call(
        id: Optional[str] = "call_1",
        name: Optional[str] = "web_search",
        arguments: Any = None,
        type: str = "toolCall",
    ) -> ToolCallBlock:
        """Create a tool call block with an ``arguments`` payload."""
        return ToolCallBlock.model_validate(
            {
                "type": type,
                "id": id,
                "name": name,
                "arguments": {"query": "cats"} if arguments is None else arguments,
            }
        )

    @staticmethod
    def assistant(
        *blocks: Any,
        stop_reason: Optional[str] = None,
    ) -> AssistantMessage:
        """Create an assistant message; strings become text blocks."""
        content = [TextBlock(text=b) if isinstance(b, str) else b for b in blocks]
        return AssistantMessage(content=content, stop_reason=stop_reason)

    @staticmethod
    def tool_result(
        tool_call_id: str = "call_1",
        text: Any = "ok",
        tool_name: str = "web_search",
        is_error: bool = False,
        timestamp: Optional[int] = 2,
    ) -> ToolResultMessage:
        """Create a tool result; a string ``text`` becomes one text block."""
        content = [TextBlock(text=text)] if isinstance(text, str) else text
        return ToolResultMessage(
            tool_call_id=tool_call_id,
            tool_name=tool_name,
            content=content,
            is_error=is_error,
            timestamp=timestamp,
        )


factory = MessageFactory()
