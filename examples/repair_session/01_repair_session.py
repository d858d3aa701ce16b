#!/usr/bin/env python3
"""
Repair a stored session before sending it to a model.

This example loads a session transcript from JSON, resolves the transcript
policy for the target model and prints the repaired transcript together
with the repair audit counts.

Environment variables (optional, also read from .env):
    - TRANSCRIPT_MODEL_API: Model API family (default: openai-responses)
    - TRANSCRIPT_PROVIDER: Provider id (default: github-copilot)
    - TRANSCRIPT_MODEL_ID: Model id (default: gemini-2.5-pro)

Usage:
    python 01_repair_session.py [session.json]
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from transcript_repair import (
    TranscriptPipeline,
    dump_transcript,
    parse_transcript,
    resolve_transcript_policy,
)


def main():
    """Repair the sample (or given) session and print the result."""
    load_dotenv()
    logging.basicConfig(
        level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s"
    )
    logging.getLogger("transcript_repair").setLevel(logging.INFO)

    model_api = os.environ.get("TRANSCRIPT_MODEL_API", "openai-responses")
    provider = os.environ.get("TRANSCRIPT_PROVIDER", "github-copilot")
    model_id = os.environ.get("TRANSCRIPT_MODEL_ID", "gemini-2.5-pro")

    session_path = (
        Path(sys.argv[1])
        if len(sys.argv) > 1
        else Path(__file__).parent / "sample_session.json"
    )
    messages = parse_transcript(json.loads(session_path.read_text()))

    policy = resolve_transcript_policy(model_api, provider, model_id)
    print(f"Policy for {provider}/{model_id}: {policy.to_dict()}")

    result = TranscriptPipeline(policy).run(messages)

    print(f"Changed: {result.changed}")
    print(f"Synthetic results: {len(result.added)}")
    print(f"Dropped tool calls: {result.dropped_tool_calls}")
    print(f"Dropped duplicates: {result.dropped_duplicate_count}")
    print(f"Dropped orphans: {result.dropped_orphan_count}")
    print(f"Moved: {result.moved}")
    print(json.dumps(dump_transcript(result.messages), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
