"""Shared fixtures: a scripted stand-in for the brew executable."""

from __future__ import annotations

import json
import os
import subprocess
import tempfile
from typing import Any

import pytest

os.environ.setdefault("BREWSTATE_LOG_DIR", tempfile.mkdtemp(prefix="brewstate-logs-"))


def formula_entry(name: str, installed: bool = True, full_name: str | None = None) -> dict[str, Any]:
    return {
        "name": name,
        "full_name": full_name or name,
        "installed": [{"version": "1.0.0", "installed_on_request": True}] if installed else [],
    }


def cask_entry(token: str, installed: bool = True, full_token: str | None = None) -> dict[str, Any]:
    return {
        "token": token,
        "full_token": full_token or token,
        "installed": "1.0.0" if installed else None,
    }


class FakeBrew:
    """Replaces ``subprocess.run`` and answers scripted brew invocations.

    Responses are keyed by the argument tuple after the executable.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, ...], tuple[int, bytes, bytes]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.envs: list[dict[str, str]] = []

    def on(
        self,
        *args: str,
        returncode: int = 0,
        stdout: str | bytes = "",
        stderr: str | bytes = "",
    ) -> None:
        out = stdout.encode() if isinstance(stdout, str) else stdout
        err = stderr.encode() if isinstance(stderr, str) else stderr
        self.responses[args] = (returncode, out, err)

    def on_info(self, *args: str, formulae: list | None = None, casks: list | None = None) -> None:
        self.on(*args, stdout=json.dumps({"formulae": formulae or [], "casks": casks or []}))

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        args = tuple(cmd[1:])
        self.calls.append(args)
        self.envs.append(kwargs.get("env") or {})
        if args not in self.responses:
            raise AssertionError(f"unexpected brew call: {args}")
        returncode, out, err = self.responses[args]
        return subprocess.CompletedProcess(cmd, returncode, out, err)


@pytest.fixture
def fake_brew(monkeypatch: pytest.MonkeyPatch) -> FakeBrew:
    fake = FakeBrew()
    monkeypatch.setattr("brewstate.core.shell.subprocess.run", fake)
    return fake
