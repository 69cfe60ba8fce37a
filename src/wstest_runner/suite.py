"""Suite resolution and the docker invocation that runs wstest."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .config import DEFAULT_SETTINGS


SUITES = ("client", "server")
USAGE_MESSAGE = "available test modes: client, server"

# wstest writes its report index under outdir, which differs per suite.
REPORT_SUBDIRS = {
    "client": "servers",
    "server": "clients",
}


@dataclass(frozen=True)
class SuiteInvocation:
    suite: str
    config_file: str
    test_mode: str


def resolve_suite(suite: str, config_dir: str = DEFAULT_SETTINGS["config_dir"]) -> SuiteInvocation:
    """Derive the config path and wstest mode for a suite name."""
    if suite not in SUITES:
        raise ValueError(f"Unknown test suite: {suite!r}")
    config_dir = config_dir.rstrip("/") or "."
    return SuiteInvocation(
        suite=suite,
        config_file=f"{config_dir}/fuzzing{suite}.json",
        test_mode=f"fuzzing{suite}",
    )


def build_docker_command(
    invocation: SuiteInvocation,
    settings: Dict[str, Any],
    cwd: Path,
) -> List[str]:
    """
    Build the `docker run` argv for one suite.

    The config file is mounted at the same relative path under the container
    root, so `-s` can keep pointing at the relative path.
    """
    config_file = invocation.config_file
    container_config = "/" + config_file.lstrip("/")
    host_config = cwd / config_file
    host_reports = cwd / settings["reports_dir"]

    command = [settings["docker_binary"], "run"]
    if settings.get("interactive", True):
        command.append("-it")
    if settings.get("remove", True):
        command.append("--rm")
    command.extend(
        [
            "-v",
            f"{host_config}:{container_config}",
            "-v",
            f"{host_reports}:/reports",
            "--network",
            settings["network"],
            "--name",
            settings["container_name"],
            settings["image"],
            "wstest",
            "--mode",
            invocation.test_mode,
            "-s",
            config_file.lstrip("/"),
        ]
    )
    return command


def format_command(command: List[str]) -> str:
    return shlex.join(command)


def report_index_path(suite: str, reports_dir: Path) -> Path:
    """Location of the report index wstest writes for a suite."""
    return reports_dir / REPORT_SUBDIRS[suite] / "index.json"


def run_suite(
    invocation: SuiteInvocation,
    settings: Dict[str, Any],
    logger: logging.Logger,
    cwd: Optional[Path] = None,
    runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
) -> int:
    """
    Launch the container in the foreground and wait for it to exit.

    Returns the container runtime's exit status unchanged.
    """
    cwd = cwd or Path.cwd()
    runner = runner or subprocess.run
    command = build_docker_command(invocation, settings, cwd)

    reports_dir = cwd / settings["reports_dir"]
    if not reports_dir.exists():
        logger.info("Creating reports directory: %s", reports_dir)
        reports_dir.mkdir(parents=True, exist_ok=True)

    host_config = cwd / invocation.config_file
    if not host_config.exists():
        logger.warning("Config file not found: %s", host_config)

    logger.info("STEP_START: run_suite %s", invocation.suite)
    logger.debug("Command: %s", format_command(command))
    try:
        proc = runner(command)
    except OSError:
        logger.error("STEP_FAILED: run_suite %s", invocation.suite)
        raise
    logger.info(
        "STEP_DONE: run_suite %s (exit=%s)", invocation.suite, proc.returncode
    )
    return proc.returncode
