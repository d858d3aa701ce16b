"""Core protocols for composable transcript transforms."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from transcript_repair.core.types import Message

T = TypeVar("T")


@runtime_checkable
class TranscriptTransform(Protocol):
    """
    A pure rewrite over an ordered message sequence.

    Implementations MUST return the input list itself (same object) when
    nothing changed, and a newly built list otherwise. Inputs are never
    mutated.

    Built-in transforms: sanitize_tool_call_inputs,
    sanitize_tool_use_result_pairing, split_parallel_tool_calls,
    textify_tool_call_rounds.
    """

    def __call__(self, messages: list["Message"]) -> list["Message"]:
        """
        Rewrite a transcript.

        Args:
            messages: Ordered, already-terminated transcript

        Returns:
            ``messages`` itself if unchanged, otherwise a new list
        """
        ...


@runtime_checkable
class TranscriptConverter(Protocol[T]):
    """
    Converts a repaired transcript to a provider-specific request shape.

    SDK users implement this for custom providers.
    The package ships an Anthropic converter.
    """

    def convert(self, messages: list["Message"]) -> T:
        """
        Convert a repaired transcript to provider format.

        Args:
            messages: Transcript after the repair pipeline ran

        Returns:
            Provider-specific message list
        """
        ...
