"""CLI orchestration module; maps a test mode to a wstest container run."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import load_settings, resolve_settings_path, write_default_suite_config
from .logging_utils import configure_logging
from .reporting import ReportError, summarize_report
from .suite import (
    SUITES,
    USAGE_MESSAGE,
    build_docker_command,
    format_command,
    report_index_path,
    resolve_suite,
    run_suite,
)

COMMAND_NOT_FOUND_EXIT = 127
NOT_EXECUTABLE_EXIT = 126
INTERRUPTED_EXIT = 130


class _ModeArgumentParser(argparse.ArgumentParser):
    """Parser whose errors surface as ArgumentError instead of exiting with status 2."""

    def error(self, message: str) -> None:
        raise argparse.ArgumentError(None, message)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for a test suite run."""
    parser = _ModeArgumentParser(
        description="Run the Autobahn WebSocket test suite in a docker container."
    )
    # Only the first positional is the mode; unknown modes print the usage line.
    parser.add_argument(
        "test",
        nargs="?",
        default=None,
        help="Test mode to run: client or server.",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help=(
            "Path to JSON runner settings. "
            "If omitted, wstest_runner.json in the current directory is used when present."
        ),
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Create a starter config/fuzzing<test>.json and exit.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the docker command instead of running it.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Summarize the report index after a successful run.",
    )
    parser.add_argument("--image", help="Override the test suite image.")
    parser.add_argument("--name", dest="container_name", help="Override the container name.")
    parser.add_argument("--reports-dir", help="Override the host reports directory.")
    parser.add_argument("--config-dir", help="Override the directory holding fuzzing configs.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log verbosity (DEBUG, INFO, WARNING, ERROR).",
    )
    args, _extra = parser.parse_known_args(argv)
    return args


def _apply_overrides(settings: Dict[str, Any], args: argparse.Namespace) -> None:
    for key in ("image", "container_name", "reports_dir", "config_dir"):
        value = getattr(args, key)
        if value:
            settings[key] = value


def _print_summary(test: str, settings: Dict[str, Any], cwd: Path) -> int:
    index_path = report_index_path(test, cwd / settings["reports_dir"])
    try:
        summaries = summarize_report(index_path)
    except ReportError as exc:
        print(f"Report summary failed: {exc}", file=sys.stderr)
        return 1
    for summary in summaries:
        print(summary.format_line())
    return 0 if all(summary.passed for summary in summaries) else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI workflow as the process entrypoint."""
    try:
        args = parse_args(argv)
    except argparse.ArgumentError:
        print(USAGE_MESSAGE)
        return 0
    if args.test not in SUITES:
        print(USAGE_MESSAGE)
        return 0

    logger = configure_logging(args.log_level)
    logger.info("STEP_START: cli")
    cwd = Path.cwd()

    logger.info("STEP_START: load_settings")
    try:
        settings = load_settings(resolve_settings_path(args.settings, cwd))
    except (OSError, ValueError) as exc:
        logger.error("STEP_FAILED: load_settings")
        print(f"Failed to load settings: {exc}", file=sys.stderr)
        return 1
    _apply_overrides(settings, args)
    logger.info("STEP_DONE: load_settings")

    invocation = resolve_suite(args.test, settings["config_dir"])

    if args.init_config:
        config_target = cwd / invocation.config_file
        if config_target.exists():
            print(f"Config already exists: {config_target}")
            return 1
        write_default_suite_config(config_target, invocation.suite)
        logger.info("STEP_DONE: init_config")
        print(f"Created starter config: {config_target}")
        return 0

    if args.dry_run:
        print(format_command(build_docker_command(invocation, settings, cwd)))
        return 0

    try:
        returncode = run_suite(invocation, settings, logger, cwd=cwd)
    except FileNotFoundError:
        print(
            f"Container runtime not found: {settings['docker_binary']}",
            file=sys.stderr,
        )
        return COMMAND_NOT_FOUND_EXIT
    except PermissionError:
        print(
            f"Container runtime is not executable: {settings['docker_binary']}",
            file=sys.stderr,
        )
        return NOT_EXECUTABLE_EXIT
    except KeyboardInterrupt:
        logger.warning("STEP_ABORTED: run_suite %s", invocation.suite)
        return INTERRUPTED_EXIT

    if returncode == 0 and args.summary:
        logger.info("STEP_START: summary")
        returncode = _print_summary(invocation.suite, settings, cwd)
        logger.info("STEP_DONE: summary")

    logger.info("STEP_DONE: cli")
    return returncode
