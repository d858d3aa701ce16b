"""
transcript-repair - make LLM chat transcripts conform to provider wire protocols.

Policy Layer:
    resolve_transcript_policy: (model API, provider, model id) -> TranscriptPolicy
    PolicyConfig: Provider tables (load from YAML with load_policy_config)

Repair Layer:
    repair_tool_call_inputs: Drop tool calls without an arguments payload
    repair_tool_use_result_pairing: Restore call/result adjacency and uniqueness
    split_parallel_tool_calls: One invocation per assistant turn
    textify_tool_call_rounds: Degrade tool rounds to plain text

Pipeline:
    TranscriptPipeline / prepare_transcript: Run the transforms a policy asks for

Example:
    from transcript_repair import TranscriptPipeline, parse_transcript

    messages = parse_transcript(session_history)
    pipeline = TranscriptPipeline.for_model(
        "openai-responses", "github-copilot", "gemini-2.5-pro"
    )
    result = pipeline.run(messages)
    if result.added:
        logger.warning(f"{len(result.added)} synthetic tool results inserted")
"""

# Message model
from .core import (
    AssistantMessage,
    Message,
    OpaqueBlock,
    OpaqueMessage,
    PolicyConfig,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
    TranscriptConverter,
    TranscriptTransform,
    UserMessage,
)

# Boundary
from .converters import dump_message, dump_transcript, parse_message, parse_transcript

# Configuration
from .config import load_policy_config

# Policy
from .policy import TranscriptPolicy, is_gemini_model, resolve_transcript_policy

# Repairs
from .repair import (
    SYNTHETIC_TOOL_RESULT_TEXT,
    TEXTIFY_MAX_RESULT_CHARS,
    TRUNCATION_MARKER,
    ToolCallInputRepairReport,
    ToolUseRepairReport,
    make_missing_tool_result,
    repair_tool_call_inputs,
    repair_tool_use_result_pairing,
    sanitize_tool_call_inputs,
    sanitize_tool_use_result_pairing,
    split_parallel_tool_calls,
    textify_tool_call_rounds,
)

# Pipeline
from .pipeline import (
    TranscriptPipeline,
    TranscriptRepairResult,
    prepare_raw_transcript,
    prepare_transcript,
)

__all__ = [
    # Messages
    "Message",
    "UserMessage",
    "AssistantMessage",
    "ToolResultMessage",
    "OpaqueMessage",
    "TextBlock",
    "ToolCallBlock",
    "OpaqueBlock",
    # Protocols
    "TranscriptTransform",
    "TranscriptConverter",
    # Boundary
    "parse_message",
    "parse_transcript",
    "dump_message",
    "dump_transcript",
    # Configuration
    "PolicyConfig",
    "load_policy_config",
    # Policy
    "TranscriptPolicy",
    "resolve_transcript_policy",
    "is_gemini_model",
    # Repairs
    "repair_tool_call_inputs",
    "sanitize_tool_call_inputs",
    "ToolCallInputRepairReport",
    "repair_tool_use_result_pairing",
    "sanitize_tool_use_result_pairing",
    "make_missing_tool_result",
    "ToolUseRepairReport",
    "SYNTHETIC_TOOL_RESULT_TEXT",
    "split_parallel_tool_calls",
    "textify_tool_call_rounds",
    "TEXTIFY_MAX_RESULT_CHARS",
    "TRUNCATION_MARKER",
    # Pipeline
    "TranscriptPipeline",
    "TranscriptRepairResult",
    "prepare_transcript",
    "prepare_raw_transcript",
]

__version__ = "0.1.0"
