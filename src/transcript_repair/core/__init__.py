"""Core message model and protocols."""

from .protocols import TranscriptConverter, TranscriptTransform
from .types import (
    INCOMPLETE_STOP_REASONS,
    TOOL_CALL_TYPES,
    AssistantMessage,
    ContentBlock,
    Message,
    OpaqueBlock,
    OpaqueMessage,
    PolicyConfig,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
    UserMessage,
    parse_content_block,
)

__all__ = [
    # Messages
    "Message",
    "UserMessage",
    "AssistantMessage",
    "ToolResultMessage",
    "OpaqueMessage",
    # Content blocks
    "ContentBlock",
    "TextBlock",
    "ToolCallBlock",
    "OpaqueBlock",
    "parse_content_block",
    "TOOL_CALL_TYPES",
    "INCOMPLETE_STOP_REASONS",
    # Configuration
    "PolicyConfig",
    # Protocols
    "TranscriptTransform",
    "TranscriptConverter",
]
