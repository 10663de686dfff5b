"""Blocking brew command execution with JSON parsing."""

from __future__ import annotations

import json
import os
import subprocess
import time
from dataclasses import dataclass
from typing import Any

from brewstate.core.config import get_settings
from brewstate.core.errors import BrewCommandError, BrewContractError, BrewExecutableError
from brewstate.core.logging import get_logger

log = get_logger(__name__)

ENV_OVERRIDES = {
    "HOMEBREW_NO_COLOR": "1",
    "HOMEBREW_NO_EMOJI": "1",
    "HOMEBREW_NO_ENV_HINTS": "1",
}


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one brew invocation."""

    command: str
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def lines(self) -> list[str]:
        """Non-empty stdout lines, stripped."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


def brew_env() -> dict[str, str]:
    """Get the environment brew runs under.

    Returns:
        A copy of the current environment with the brew overrides applied.
    """
    env = os.environ.copy()
    env.update(ENV_OVERRIDES)

    return env


def _decode(data: bytes, command: str, stream: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        log.error("command_output_not_utf8", command=command, stream=stream, error=str(e))
        raise BrewContractError(
            f"brew wrote invalid UTF-8 to {stream}",
            command=command,
        ) from e


def run_capture(*args: str) -> CommandResult:
    """Run brew with the given arguments and wait for it to exit.

    There is no timeout: a hung brew blocks the caller.

    Args:
        *args: Arguments passed to brew.

    Returns:
        A CommandResult with decoded stdout and stderr.

    Raises:
        BrewExecutableError: If brew could not be started.
        BrewContractError: If brew wrote invalid UTF-8.
    """
    brew = get_settings().brew
    cmd = [brew, *args]
    command = " ".join(["brew", *args])
    start = time.perf_counter()
    log.debug("command_start", command=command)

    try:
        completed = subprocess.run(cmd, capture_output=True, env=brew_env(), check=False)
    except (FileNotFoundError, PermissionError) as e:
        log.error("command_not_started", command=command, path=brew, error=str(e))
        raise BrewExecutableError(path=brew) from e

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "command_complete",
        command=command,
        returncode=completed.returncode,
        duration_ms=duration_ms
    )

    return CommandResult(
        command=command,
        stdout=_decode(completed.stdout, command, "stdout"),
        stderr=_decode(completed.stderr, command, "stderr"),
        returncode=completed.returncode,
    )


def parse_json(result: CommandResult) -> Any:
    """Parse the stdout of a successful command as JSON.

    Raises:
        BrewContractError: If stdout is not valid JSON.
    """
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        log.error(
            "json_parse_failed",
            command=result.command,
            error=str(e),
        )
        raise BrewContractError(
            "Failed to parse JSON output",
            command=result.command,
            output_preview=result.stdout[:200],
        ) from e

    log.debug("json_parsed", command=result.command)
    return data


def run_json(*args: str) -> Any:
    """Run brew and parse its JSON output.

    Args:
        *args: Arguments passed to brew.

    Returns:
        Parsed JSON output.

    Raises:
        BrewCommandError: If the command exits with a non-zero status.
        BrewContractError: If the output is not valid JSON.
    """
    result = run_capture(*args)

    if not result.ok:
        log.error(
            "command_failed",
            command=result.command,
            error=result.stderr or result.stdout,
            returncode=result.returncode
        )
        raise BrewCommandError(
            command=result.command,
            returncode=result.returncode,
            error=(result.stderr or result.stdout).strip(),
        )

    return parse_json(result)
