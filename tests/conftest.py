"""
Pytest fixtures for transcript-repair tests.

Provides ready-made transcripts for the common tool-round shapes.
"""

import pytest

from tests.fixtures import factory


@pytest.fixture
def search_round():
    """User question, one tool round, and a closing assistant reply."""
    return [
        factory.user("search for cats"),
        factory.assistant(factory.tool_call("call_1", "web_search", {"query": "cats"})),
        factory.tool_result("call_1", "Found 10 results about cats"),
        factory.assistant("Here are the results."),
    ]


@pytest.fixture
def parallel_round():
    """One assistant turn with two invocations, each answered in order."""
    return [
        factory.assistant(
            factory.tool_call("call_1", "web_search", {"query": "dogs"}),
            factory.tool_call("call_2", "web_fetch", {"url": "http://example.com"}),
        ),
        factory.tool_result("call_1", "dog results", tool_name="web_search"),
        factory.tool_result("call_2", "page content", tool_name="web_fetch"),
    ]


@pytest.fixture
def raw_session():
    """Raw session history as stored on disk (wire spelling)."""
    return [
        {"role": "user", "content": "search for cats", "timestamp": 1},
        {
            "role": "assistant",
            "content": [
                {"type": "text", "text": "Searching."},
                {
                    "type": "toolUse",
                    "id": "tu_1",
                    "name": "web_search",
                    "input": {"query": "cats"},
                },
            ],
            "stopReason": "toolUse",
            "provider": "github-copilot",
            "model": "gemini-2.5-pro",
        },
        {"role": "user", "content": "any luck?", "timestamp": 3},
        {
            "role": "toolResult",
            "toolCallId": "tu_1",
            "toolName": "web_search",
            "content": [{"type": "text", "text": "Found 10 results about cats"}],
            "isError": False,
            "timestamp": 4,
        },
    ]
