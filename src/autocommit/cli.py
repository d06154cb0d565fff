"""Command line front end for autocommit."""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from autocommit.app import AutoCommitApp
from autocommit.errors import AutoCommitError
from autocommit.scheduler import COMMIT_ERROR_EVENT


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autocommit",
        description="Commit and push a repository periodically with Gemini-written commit messages",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Commit pending changes now")
    run.add_argument("--repo", type=str, help="Repository path (default: configured repository)")

    config = commands.add_parser("config", help="Show or change the saved configuration")
    config_commands = config.add_subparsers(dest="config_command", required=True)
    config_commands.add_parser("show", help="Print the saved configuration")
    config_set = config_commands.add_parser("set", help="Update and save configuration fields")
    config_set.add_argument("--repo", type=str, help="Repository path")
    config_set.add_argument("--interval", type=int, help="Minutes between automatic commits")
    config_set.add_argument("--enable", dest="enabled", action="store_true", default=None, help="Enable auto-commit")
    config_set.add_argument("--disable", dest="enabled", action="store_false", help="Disable auto-commit")
    config_set.add_argument("--auto-start", dest="auto_start", action="store_true", default=None)
    config_set.add_argument("--no-auto-start", dest="auto_start", action="store_false")
    config_set.add_argument("--api-key", type=str, help="Gemini API key")

    start = commands.add_parser("start", help="Run the scheduler until interrupted")
    start.add_argument("--force", action="store_true", help="Start even when auto-start is disabled")

    validate = commands.add_parser("validate-key", help="Check a Gemini API key")
    validate.add_argument("api_key", nargs="?", help="Key to check (default: $GEMINI_API_KEY)")

    commands.add_parser("select-repo", help="Choose the repository folder and save it")

    return parser


def _print_event(event: str, payload: str) -> None:
    if event == COMMIT_ERROR_EVENT:
        logger.error(f"Commit failed: {payload}")
    else:
        logger.success(f"Committed: {payload}")


async def _run(app: AutoCommitApp, args: argparse.Namespace) -> int:
    config = app.load_config_from_file()
    repo_path = os.path.abspath(args.repo) if args.repo else config.repo_path
    outcome = await app.run_commit(repo_path)
    print(outcome)
    return 0


def _config(app: AutoCommitApp, args: argparse.Namespace) -> int:
    config = app.load_config_from_file()
    if args.config_command == "show":
        print(json.dumps(config.masked().model_dump(), indent=2))
        return 0

    updates = {
        "repo_path": os.path.abspath(args.repo) if args.repo else None,
        "interval_minutes": args.interval,
        "auto_commit_enabled": args.enabled,
        "auto_start": args.auto_start,
        "gemini_api_key": args.api_key,
    }
    config = config.model_copy(update={k: v for k, v in updates.items() if v is not None})
    app.save_config(config)
    print(json.dumps(config.masked().model_dump(), indent=2))
    return 0


async def _start(app: AutoCommitApp, args: argparse.Namespace) -> int:
    app.events.subscribe(_print_event)
    if args.force:
        app.load_config_from_file()
        app.start_auto_commit()
    elif not await app.launch():
        logger.warning("Enable auto_start and auto_commit_enabled, or pass --force")
        return 1

    try:
        # Runs until interrupted
        await asyncio.Event().wait()
    finally:
        app.stop_auto_commit()
    return 0


async def _validate_key(app: AutoCommitApp, args: argparse.Namespace) -> int:
    api_key = args.api_key or os.getenv("GEMINI_API_KEY", "")
    print(await app.test_api_key(api_key))
    return 0


def _select_repo(app: AutoCommitApp) -> int:
    path = app.select_directory()
    if path is None:
        print("No folder was selected")
        return 1
    config = app.load_config_from_file()
    app.save_config(config.model_copy(update={"repo_path": path}))
    print(path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    load_dotenv()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    app = AutoCommitApp()
    try:
        if args.command == "run":
            return asyncio.run(_run(app, args))
        if args.command == "config":
            return _config(app, args)
        if args.command == "start":
            return asyncio.run(_start(app, args))
        if args.command == "validate-key":
            return asyncio.run(_validate_key(app, args))
        return _select_repo(app)
    except AutoCommitError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
