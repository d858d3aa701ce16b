"""
Core types for transcript repair.

This module defines the message vocabulary every transform reads and writes,
plus the configuration value consumed by the policy resolver.

Messages are tagged on ``role``:
    UserMessage        role="user"
    AssistantMessage   role="assistant"
    ToolResultMessage  role="toolResult"
    OpaqueMessage      anything the boundary could not classify

Content blocks are tagged on ``kind``:
    TextBlock      kind="text"
    ToolCallBlock  kind="tool_call" (wire spellings toolCall/toolUse/functionCall)
    OpaqueBlock    kind="opaque"   (thinking, image, unknown shapes)

KEY DESIGN PRINCIPLE:
    Models are values. Transforms never assign to an input message; they
    build new instances with ``model_copy(update=...)`` and pass untouched
    messages through by reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Wire spellings of a tool invocation block across provider dialects
TOOL_CALL_TYPES: frozenset[str] = frozenset({"toolCall", "toolUse", "functionCall"})

ToolCallType = Literal["toolCall", "toolUse", "functionCall"]

# Stop reasons whose tool invocations may be partial and must not be paired
INCOMPLETE_STOP_REASONS: frozenset[str] = frozenset({"error", "aborted"})


class _WireModel(BaseModel):
    """Base for models mirroring the camelCase wire shape."""

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# --- Content blocks ---


class TextBlock(_WireModel):
    """Plain text content."""

    type: Literal["text"] = "text"
    text: str

    @property
    def kind(self) -> Literal["text"]:
        return "text"


class ToolCallBlock(_WireModel):
    """
    A tool invocation inside assistant content.

    The three provider spellings (``toolCall``, ``toolUse``, ``functionCall``)
    are kept in ``type`` for round-tripping, but core logic only looks at
    ``kind``. The payload may arrive under ``input`` or ``arguments``; both
    are normalized into ``arguments`` and ``arguments_field`` remembers the
    original key.
    """

    type: ToolCallType = "toolCall"
    id: str | None = None
    name: str | None = None
    arguments: Any = None
    arguments_field: Literal["input", "arguments"] = Field(
        default="arguments", exclude=True
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        has_input = "input" in data
        raw_input = data.pop("input", None)
        raw_arguments = data.pop("arguments", None)

        if raw_input is not None:
            data["arguments"] = raw_input
            data.setdefault("arguments_field", "input")
        elif raw_arguments is not None:
            data["arguments"] = raw_arguments
            data.setdefault("arguments_field", "arguments")
        elif has_input:
            data.setdefault("arguments_field", "input")

        # Non-string ids and names are not usable for correlation
        if not isinstance(data.get("id"), str) or not data.get("id"):
            data["id"] = None
        if not isinstance(data.get("name"), str):
            data["name"] = None
        return data

    @property
    def kind(self) -> Literal["tool_call"]:
        return "tool_call"

    @property
    def has_arguments(self) -> bool:
        """True when either ``input`` or ``arguments`` carried a non-null value."""
        return self.arguments is not None

    def to_wire(self) -> dict[str, Any]:
        """Dump back to the provider spelling this block arrived in."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        data.pop("arguments", None)
        if self.arguments is not None:
            data[self.arguments_field] = self.arguments
        return data


class OpaqueBlock(BaseModel):
    """Any content block the transforms do not interpret."""

    model_config = ConfigDict(frozen=True)

    raw: Any

    @property
    def kind(self) -> Literal["opaque"]:
        return "opaque"


ContentBlock = Union[TextBlock, ToolCallBlock, OpaqueBlock]


def parse_content_block(raw: Any) -> ContentBlock:
    """
    Classify one raw content block.

    Never raises: anything that is not a well-formed text or tool-call
    block becomes an OpaqueBlock carrying the original value.
    """
    if isinstance(raw, (TextBlock, ToolCallBlock, OpaqueBlock)):
        return raw
    if not isinstance(raw, dict):
        return OpaqueBlock(raw=raw)

    block_type = raw.get("type")
    if block_type == "text" and isinstance(raw.get("text"), str):
        return TextBlock.model_validate(raw)
    if isinstance(block_type, str) and block_type in TOOL_CALL_TYPES:
        return ToolCallBlock.model_validate(raw)
    return OpaqueBlock(raw=raw)


# --- Messages ---


class _ContentModel(_WireModel):
    """Base for messages whose ``content`` may hold raw block dicts."""

    @field_validator("content", mode="before", check_fields=False)
    @classmethod
    def parse_blocks(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [parse_content_block(item) for item in value]
        return value


class UserMessage(_ContentModel):
    """A user turn; content is a plain string or a list of blocks."""

    role: Literal["user"] = "user"
    content: str | list[ContentBlock]
    timestamp: Any = None


class AssistantMessage(_ContentModel):
    """A model turn: text and/or tool invocation blocks."""

    role: Literal["assistant"] = "assistant"
    content: list[ContentBlock]
    stop_reason: str | None = None
    timestamp: Any = None

    @property
    def tool_calls(self) -> list[ToolCallBlock]:
        """Tool invocations with a usable correlation id, in content order."""
        return [
            block
            for block in self.content
            if isinstance(block, ToolCallBlock) and block.id
        ]

    @property
    def is_incomplete(self) -> bool:
        """Errored or aborted turns whose tool invocations may be partial."""
        return self.stop_reason in INCOMPLETE_STOP_REASONS


class ToolResultMessage(_ContentModel):
    """
    The outcome of one tool invocation.

    Correlates to its invocation through ``toolCallId``; the older
    ``toolUseId`` spelling is accepted as a fallback.
    """

    role: Literal["toolResult"] = "toolResult"
    tool_call_id: str | None = None
    tool_use_id: str | None = None
    tool_name: str | None = None
    content: str | list[ContentBlock] = Field(default_factory=list)
    is_error: bool = False
    timestamp: Any = None

    @field_validator("tool_call_id", "tool_use_id", "tool_name", mode="before")
    @classmethod
    def non_string_to_none(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @field_validator("is_error", mode="before")
    @classmethod
    def coerce_is_error(cls, value: Any) -> bool:
        # Stored sessions carry null or string flags
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        return bool(value)

    @property
    def correlation_id(self) -> str | None:
        """The invocation id this result answers, or None if it has none."""
        if self.tool_call_id:
            return self.tool_call_id
        if self.tool_use_id:
            return self.tool_use_id
        return None


class OpaqueMessage(BaseModel):
    """A transcript entry the boundary could not classify; always passed through."""

    model_config = ConfigDict(frozen=True)

    raw: Any

    @property
    def role(self) -> Any:
        if isinstance(self.raw, dict):
            return self.raw.get("role")
        return None


Message = Union[UserMessage, AssistantMessage, ToolResultMessage, OpaqueMessage]


# --- Configuration ---


@dataclass(frozen=True)
class PolicyConfig:
    """
    Provider tables consulted by the policy resolver.

    Provider ids are compared lower-cased; ``gemini_model_pattern`` is a
    case-insensitive regular expression searched in the model id.
    """

    google_providers: tuple[str, ...] = ("google", "google-generative-ai")
    copilot_providers: tuple[str, ...] = ("github-copilot",)
    gemini_aggregator_providers: tuple[str, ...] = ("openrouter",)
    gemini_model_pattern: str = r"(^|[/:])gemini"
