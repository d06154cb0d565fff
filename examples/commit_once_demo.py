#!/usr/bin/env python3
"""
examples/commit_once_demo.py

Runs the commit pipeline a single time against a repository, the same way the
scheduler does on each tick, and prints the outcome.
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

from autocommit.errors import AutoCommitError
from autocommit.nodes.message_generator import GeminiClient, MessageGenerator
from autocommit.settings import Settings
from autocommit.workflow import CommitPipeline


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Commit and push pending changes once")
    parser.add_argument(
        "--repo-path",
        type=str,
        default=os.getcwd(),
        help="Path to Git repository (default: current directory)",
    )
    return parser.parse_args()


def main():
    """Run the pipeline once."""
    args = parse_args()
    load_dotenv()

    api_key = os.getenv("GEMINI_API_KEY", "")
    pipeline = CommitPipeline(message_generator=MessageGenerator(GeminiClient(Settings.from_env())))

    print(f"Running autocommit pipeline on repository: {args.repo_path}")
    try:
        outcome = asyncio.run(pipeline.run(args.repo_path, api_key))
    except AutoCommitError as e:
        print(f"Commit failed: {e}", file=sys.stderr)
        return 1

    print(outcome)
    return 0


if __name__ == "__main__":
    sys.exit(main())
