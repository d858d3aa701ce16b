"""
Transcript repair transforms.

All transforms are pure: they return the input list itself when nothing
changed and a new list otherwise.

Example:
    from transcript_repair.repair import (
        repair_tool_use_result_pairing,
        textify_tool_call_rounds,
    )

    report = repair_tool_use_result_pairing(messages)
    if report.added:
        ...  # synthetic results were inserted
    messages = textify_tool_call_rounds(report.messages)
"""

from .pairing import (
    SYNTHETIC_TOOL_RESULT_TEXT,
    ToolUseRepairReport,
    make_missing_tool_result,
    repair_tool_use_result_pairing,
    sanitize_tool_use_result_pairing,
)
from .sanitizer import (
    ToolCallInputRepairReport,
    repair_tool_call_inputs,
    sanitize_tool_call_inputs,
)
from .split import split_parallel_tool_calls
from .textify import (
    TEXTIFY_MAX_RESULT_CHARS,
    TRUNCATION_MARKER,
    textify_tool_call_rounds,
)

__all__ = [
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
]
