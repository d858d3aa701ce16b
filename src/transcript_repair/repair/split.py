"""
Parallel tool-call splitting.

Some relays only accept one tool invocation per assistant turn. After
pairing repair, a parallel round looks like:

    assistant[text, call_1, call_2], result_1, result_2

and is rewritten to:

    assistant[text, call_1], result_1, assistant[call_2], result_2

Rounds that are not in paired shape are left alone.
"""

from __future__ import annotations

import logging

from transcript_repair.core.types import (
    AssistantMessage,
    Message,
    ToolCallBlock,
    ToolResultMessage,
)

logger = logging.getLogger(__name__)


def split_parallel_tool_calls(messages: list[Message]) -> list[Message]:
    """
    Split assistant turns with several paired invocations into one turn each.

    Non-invocation blocks stay on the first split turn, in their original
    order. Errored or aborted turns are never split.

    Returns:
        The input list itself when no turn was split.
    """
    changed = False
    out: list[Message] = []

    i = 0
    total = len(messages)
    while i < total:
        msg = messages[i]
        i += 1

        if not isinstance(msg, AssistantMessage) or msg.is_incomplete:
            out.append(msg)
            continue

        tool_calls = msg.tool_calls
        if len(tool_calls) < 2:
            out.append(msg)
            continue

        results = messages[i : i + len(tool_calls)]
        if not _is_paired(tool_calls, results):
            out.append(msg)
            continue

        changed = True
        i += len(tool_calls)
        logger.debug(f"Splitting assistant turn with {len(tool_calls)} tool calls")

        later_calls = {id(call) for call in tool_calls[1:]}
        first_content = [
            block for block in msg.content if id(block) not in later_calls
        ]
        out.append(msg.model_copy(update={"content": first_content}))
        out.append(results[0])

        for call, result in zip(tool_calls[1:], results[1:]):
            out.append(msg.model_copy(update={"content": [call]}))
            out.append(result)

    return out if changed else messages


def _is_paired(
    tool_calls: list[ToolCallBlock], results: list[Message]
) -> bool:
    if len(results) != len(tool_calls):
        return False
    if len({call.id for call in tool_calls}) != len(tool_calls):
        return False
    return all(
        isinstance(result, ToolResultMessage) and result.correlation_id == call.id
        for call, result in zip(tool_calls, results)
    )
