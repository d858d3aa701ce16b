"""Tests for tool call textification."""

import pytest

from tests.fixtures import factory
from transcript_repair.core.types import (
    OpaqueBlock,
    TextBlock,
    ToolCallBlock,
    ToolResultMessage,
    UserMessage,
)
from transcript_repair.repair.textify import (
    TEXTIFY_MAX_RESULT_CHARS,
    TRUNCATION_MARKER,
    extract_tool_result_text,
    format_arguments,
    textify_tool_call_rounds,
    truncate_tool_result_text,
)


def summary_text(msg) -> str:
    return [b for b in msg.content if isinstance(b, TextBlock)][-1].text


class TestSimpleRound:
    """Tests for a single tool round."""

    def test_converts_round_to_text(self, search_round):
        """Assistant call becomes a summary, result becomes a user turn."""
        out = textify_tool_call_rounds(search_round)

        # user message unchanged
        assert out[0] is search_round[0]

        assistant = out[1]
        assert assistant.role == "assistant"
        assert len(assistant.content) == 1
        assert summary_text(assistant) == '[Called tool web_search({"query":"cats"})]'

        result = out[2]
        assert isinstance(result, UserMessage)
        assert result.content == "[Tool web_search result: Found 10 results about cats]"

        # trailing assistant unchanged
        assert out[3] is search_round[3]
        assert len(out) == 4

    def test_result_keeps_timestamp(self, search_round):
        """Converted result turns carry the original result timestamp."""
        out = textify_tool_call_rounds(search_round)

        assert out[2].timestamp == search_round[2].timestamp

    def test_preserves_non_tool_blocks(self):
        """Text before the call stays, followed by the summary block."""
        messages = [
            factory.assistant(
                "Let me search for that.",
                factory.tool_call("call_1", "web_search", {"query": "test"}),
            ),
            factory.tool_result("call_1", "search results"),
        ]

        out = textify_tool_call_rounds(messages)

        content = out[0].content
        assert len(content) == 2
        assert content[0].text == "Let me search for that."
        assert content[1].text.startswith("[Called tool web_search(")

    def test_preserves_opaque_blocks(self):
        """Thinking blocks survive textification."""
        thinking = OpaqueBlock(raw={"type": "thinking", "thinking": "hmm"})
        messages = [factory.assistant(thinking, factory.tool_call("call_1"))]

        out = textify_tool_call_rounds(messages)

        assert out[0].content[0] is thinking

    def test_input_payload_and_tool_use_spelling(self):
        """toolUse blocks with an input payload are summarized too."""
        call = ToolCallBlock.model_validate(
            {"type": "toolUse", "id": "tu_1", "name": "bash", "input": {"command": "echo hi"}}
        )
        messages = [factory.assistant(call), factory.tool_result("tu_1", "hi", "bash")]

        out = textify_tool_call_rounds(messages)

        assert summary_text(out[0]) == '[Called tool bash({"command":"echo hi"})]'


class TestMultipleCalls:
    """Tests for parallel and repeated rounds."""

    def test_two_calls_in_one_turn(self, parallel_round):
        """The summary lists both calls; results follow in invocation order."""
        out = textify_tool_call_rounds(parallel_round)

        summary = summary_text(out[0])
        assert summary.split("\n") == [
            '[Called tool web_search({"query":"dogs"})]',
            '[Called tool web_fetch({"url":"http://example.com"})]',
        ]
        assert out[1].content == "[Tool web_search result: dog results]"
        assert out[2].content == "[Tool web_fetch result: page content]"
        assert len(out) == 3

    def test_separate_rounds_keep_their_results(self):
        """Results from different rounds are not consumed by the wrong turn."""
        between = factory.user("ok do something else")
        messages = [
            factory.assistant(factory.tool_call("call_1", "search", {})),
            factory.tool_result("call_1", "result1", "search"),
            between,
            factory.assistant(factory.tool_call("call_2", "exec", {})),
            factory.tool_result("call_2", "result2", "exec"),
        ]

        out = textify_tool_call_rounds(messages)

        assert [m.role for m in out] == ["assistant", "user", "user", "assistant", "user"]
        assert "result1" in out[1].content
        assert out[2] is between
        assert "result2" in out[4].content


class TestMissingAndUnmatched:
    """Tests for calls without results and results without calls."""

    def test_call_without_result(self):
        """Only the textified assistant remains; no result turn is invented."""
        messages = [factory.assistant(factory.tool_call("call_orphan", "exec", {"cmd": "ls"}))]

        out = textify_tool_call_rounds(messages)

        assert len(out) == 1
        assert summary_text(out[0]) == '[Called tool exec({"cmd":"ls"})]'

    def test_unmatched_result_passes_through(self):
        """A result with no matching invocation is left in place."""
        stray = factory.tool_result("call_stray")
        messages = [
            factory.assistant(factory.tool_call("call_1")),
            stray,
        ]

        out = textify_tool_call_rounds(messages)

        assert out[-1] is stray

    def test_first_result_wins_for_duplicate_ids(self):
        """Duplicate result ids resolve to the first occurrence; both are consumed."""
        messages = [
            factory.assistant(factory.tool_call("call_1")),
            factory.tool_result("call_1", "first"),
            factory.tool_result("call_1", "second"),
        ]

        out = textify_tool_call_rounds(messages)

        assert len(out) == 2
        assert "first" in out[1].content

    def test_unnamed_tool(self):
        """Nameless invocations render as unknown_tool."""
        call = ToolCallBlock.model_validate({"type": "toolCall", "id": "c1", "arguments": {}})

        out = textify_tool_call_rounds([factory.assistant(call)])

        assert summary_text(out[0]) == "[Called tool unknown_tool({})]"


class TestIdentity:
    """Tests for the no-change contract."""

    def test_returns_same_list_without_tool_calls(self):
        """No invocations returns the input list itself."""
        messages = [factory.user("hello"), factory.assistant("hi there")]

        assert textify_tool_call_rounds(messages) is messages

    def test_idempotent(self, search_round):
        """Textified output has no invocations left to textify."""
        once = textify_tool_call_rounds(search_round)

        assert textify_tool_call_rounds(once) is once


class TestResultText:
    """Tests for result text extraction and truncation."""

    def test_string_content(self):
        """Raw string content is used directly."""
        result = ToolResultMessage(tool_call_id="c1", content="raw string content")

        assert extract_tool_result_text(result) == "raw string content"

    def test_joins_text_blocks(self):
        """Multiple text blocks are joined by newlines; others are ignored."""
        result = factory.tool_result(
            "c1",
            [TextBlock(text="a"), OpaqueBlock(raw={"type": "image"}), TextBlock(text="b")],
        )

        assert extract_tool_result_text(result) == "a\nb"

    def test_empty_content(self):
        """Results without text render as (no content)."""
        result = factory.tool_result("c1", [])

        assert extract_tool_result_text(result) == "(no content)"

    def test_truncation_exact(self):
        """Text longer than the limit keeps exactly the limit plus the marker."""
        text = "x" * 2000

        truncated = truncate_tool_result_text(text)

        assert truncated == "x" * TEXTIFY_MAX_RESULT_CHARS + TRUNCATION_MARKER
        assert TRUNCATION_MARKER == "… (truncated)"

    def test_text_at_limit_unchanged(self):
        """Text of exactly the limit is not truncated."""
        text = "y" * TEXTIFY_MAX_RESULT_CHARS

        assert truncate_tool_result_text(text) == text

    def test_long_result_truncated_in_round(self):
        """Textified result turns apply truncation."""
        messages = [
            factory.assistant(factory.tool_call("call_1", "read", {"path": "big.txt"})),
            factory.tool_result("call_1", "x" * 2000, "read"),
        ]

        out = textify_tool_call_rounds(messages)

        expected = "x" * TEXTIFY_MAX_RESULT_CHARS + TRUNCATION_MARKER
        assert out[1].content == f"[Tool read result: {expected}]"


class TestFormatArguments:
    """Tests for argument serialization."""

    def test_compact_json(self):
        """No whitespace after separators."""
        assert format_arguments({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_missing_arguments(self):
        """Absent payloads render as {}."""
        assert format_arguments(None) == "{}"

    @pytest.mark.parametrize("arguments", ["", 0, False])
    def test_falsy_scalars_render_as_empty_object(self, arguments):
        """Falsy scalar payloads render as {}."""
        assert format_arguments(arguments) == "{}"

    def test_empty_containers_kept(self):
        """Empty objects and lists serialize as themselves."""
        assert format_arguments({}) == "{}"
        assert format_arguments([]) == "[]"

    def test_non_ascii_preserved(self):
        """Unicode is kept as-is."""
        assert format_arguments({"q": "café"}) == '{"q":"café"}'
