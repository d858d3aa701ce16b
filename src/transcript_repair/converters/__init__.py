"""
Built-in transcript converters.

The Anthropic converter needs the optional extra and is imported explicitly:
    from transcript_repair.converters.anthropic import AnthropicTranscriptConverter
"""

from transcript_repair.converters.agent_messages import (
    dump_message,
    dump_transcript,
    parse_message,
    parse_transcript,
)

__all__ = [
    "parse_message",
    "parse_transcript",
    "dump_message",
    "dump_transcript",
]
