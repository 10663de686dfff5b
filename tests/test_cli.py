from __future__ import annotations

import json

from typer.testing import CliRunner

from brewstate.cli.main import app
from brewstate.core.errors import EXIT_BREW_ERROR, EXIT_USER_ERROR
from conftest import FakeBrew, cask_entry, formula_entry

runner = CliRunner()


def test_list_json(fake_brew: FakeBrew) -> None:
    fake_brew.on("list", "--formula", stdout="wget\n")
    fake_brew.on("list", "--cask", stdout="warp\n")

    result = runner.invoke(app, ["list", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"name": "wget", "kind": "formula", "installed": True},
        {"name": "warp", "kind": "cask", "installed": True},
    ]


def test_list_table(fake_brew: FakeBrew) -> None:
    fake_brew.on("list", "--cask", stdout="warp\n")

    result = runner.invoke(app, ["list", "--kind", "cask"])

    assert result.exit_code == 0
    assert "warp" in result.stdout
    assert fake_brew.calls == [("list", "--cask")]


def test_info(fake_brew: FakeBrew) -> None:
    fake_brew.on_info("info", "--cask", "--json=v2", "julia", casks=[cask_entry("julia", installed=False)])

    result = runner.invoke(app, ["info", "julia", "--kind", "cask", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"name": "julia", "kind": "cask", "installed": False}


def test_info_unknown_package(fake_brew: FakeBrew) -> None:
    fake_brew.on("info", "--json=v2", "nope", returncode=1, stderr="Error: No available formula\n")

    result = runner.invoke(app, ["info", "nope", "--json"])

    assert result.exit_code == EXIT_USER_ERROR
    assert json.loads(result.stdout)["error"] == {
        "type": "PackageCreateError",
        "msg": "Error: No available formula\n",
        "context": {"package": "nope"},
    }


def test_install(fake_brew: FakeBrew) -> None:
    fake_brew.on_info("info", "--json=v2", "jq", formulae=[formula_entry("jq", installed=False)])
    fake_brew.on("install", "--formula", "jq")

    result = runner.invoke(app, ["install", "jq", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"name": "jq", "kind": "formula", "installed": True}
    assert fake_brew.calls[-1] == ("install", "--formula", "jq")


def test_install_refuses_installed_package(fake_brew: FakeBrew) -> None:
    fake_brew.on_info("info", "--json=v2", "jq", formulae=[formula_entry("jq")])

    result = runner.invoke(app, ["install", "jq"])

    assert result.exit_code == EXIT_USER_ERROR
    assert "already installed" in result.stdout
    assert len(fake_brew.calls) == 1


def test_install_failure_shows_brew_diagnostic(fake_brew: FakeBrew) -> None:
    fake_brew.on_info("info", "--cask", "--json=v2", "zed", casks=[cask_entry("zed", installed=False)])
    fake_brew.on("install", "--cask", "zed", returncode=1, stderr="Error: Download failed on Cask 'zed'\n")

    result = runner.invoke(app, ["install", "zed", "--kind", "cask"])

    assert result.exit_code == EXIT_BREW_ERROR
    assert "Download failed on Cask 'zed'" in result.stdout


def test_uninstall_not_installed(fake_brew: FakeBrew) -> None:
    fake_brew.on_info("info", "--json=v2", "uv", formulae=[formula_entry("uv", installed=False)])

    result = runner.invoke(app, ["uninstall", "uv", "--json"])

    assert result.exit_code == EXIT_USER_ERROR
    assert json.loads(result.stdout)["error"]["type"] == "NotInstalledError"


def test_reinstall(fake_brew: FakeBrew) -> None:
    fake_brew.on_info("info", "--json=v2", "warp", casks=[cask_entry("warp")])
    fake_brew.on("reinstall", "--cask", "warp")

    result = runner.invoke(app, ["reinstall", "warp"])

    assert result.exit_code == 0
    assert "Reinstalled cask" in result.stdout


def test_search_json(fake_brew: FakeBrew) -> None:
    fake_brew.on("search", "--cask", "warp", stdout="warp\n")
    fake_brew.on_info("info", "--cask", "--json=v2", "warp", casks=[cask_entry("warp")])

    result = runner.invoke(app, ["search", "warp", "--kind", "cask", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"name": "warp", "kind": "cask", "installed": True}]
