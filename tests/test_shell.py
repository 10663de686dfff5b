from __future__ import annotations

import pytest

from brewstate.core import shell
from brewstate.core.errors import BrewCommandError, BrewExecutableError
from conftest import FakeBrew


def test_run_capture_decodes_output(fake_brew: FakeBrew) -> None:
    fake_brew.on("list", "--formula", stdout="wget\n", stderr="Warning: something\n")

    result = shell.run_capture("list", "--formula")

    assert result.ok
    assert result.stdout == "wget\n"
    assert result.stderr == "Warning: something\n"
    assert result.command == "brew list --formula"


def test_brew_runs_without_colour(fake_brew: FakeBrew) -> None:
    fake_brew.on("list", "--cask")

    shell.run_capture("list", "--cask")

    env = fake_brew.envs[0]
    assert env["HOMEBREW_NO_COLOR"] == "1"
    assert env["HOMEBREW_NO_EMOJI"] == "1"


def test_lines_skips_blanks() -> None:
    result = shell.CommandResult(command="brew list", stdout=" a \n\nb\n", stderr="", returncode=0)

    assert result.lines() == ["a", "b"]


def test_missing_brew(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr("brewstate.core.shell.subprocess.run", missing)

    with pytest.raises(BrewExecutableError):
        shell.run_capture("list")


def test_run_json(fake_brew: FakeBrew) -> None:
    fake_brew.on("info", "--json=v2", "--installed", stdout='{"formulae": [], "casks": []}')

    assert shell.run_json("info", "--json=v2", "--installed") == {"formulae": [], "casks": []}


def test_run_json_failure(fake_brew: FakeBrew) -> None:
    fake_brew.on("info", "--json=v2", "x", returncode=1, stderr="Error: nope\n")

    with pytest.raises(BrewCommandError) as excinfo:
        shell.run_json("info", "--json=v2", "x")

    assert excinfo.value.context == {"command": "brew info --json=v2 x", "returncode": 1, "error": "Error: nope"}
