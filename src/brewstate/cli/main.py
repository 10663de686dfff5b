"""CLI entry point for brewstate."""

from __future__ import annotations

import json
import sys
from typing import Any, Callable, Optional

import typer

from brewstate.cli.renderers import console, package_details, package_table, transition_message
from brewstate.core.errors import (
    BrewError,
    InstalledPackageCreateError,
    PackageCreateError,
    exit_code_for,
    format_error_message,
    suggest_search,
)
from brewstate.core.logging import configure_logging, get_logger
from brewstate.core.models import PackageKind
from brewstate.core.package import require_installed, require_not_installed
from brewstate.core.repo import Repository

log = get_logger(__name__)

app = typer.Typer(help="brewstate: install and inspect Homebrew formulae and casks.")

KindOption = typer.Option(None, "--kind", "-k", help="formula | cask (default: let brew decide)")
JsonOption = typer.Option(False, "--json", help="Print structured JSON instead of tables")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to the console at DEBUG level")
) -> None:
    """Configure logging before any command runs."""
    configure_logging(level="DEBUG" if verbose else None, enable_console=verbose, force=True)


def print_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def handle_error(error: Exception, as_json: bool = False) -> int:
    """Report an error and return the exit code for it.

    Args:
        error: The exception to handle.
        as_json: Print the structured error instead of the message.

    Returns:
        An integer exit code.
    """
    if isinstance(error, BrewError):
        log.error(
            "cli_error",
            error_type=type(error).__name__,
            message=error.message,
            context=error.context,
        )
        if as_json:
            print_json({"error": error.to_dict()})
        else:
            console.print(f"\n{format_error_message(error)}\n", style="bold red", markup=False)

            if isinstance(error, (PackageCreateError, InstalledPackageCreateError)):
                package = error.context.get("package", "")
                console.print(suggest_search(package), style="dim", markup=False)

        return exit_code_for(error)

    log.error(
        "unexpected_error",
        error=str(error),
        exc_info=True
    )
    if as_json:
        print_json({"error": {"type": type(error).__name__, "msg": str(error), "context": {}}})
    else:
        console.print(
            f"\n⚠️ Unexpected error occurred: {error}\n",
            style="bold red",
            markup=False,
        )
    return exit_code_for(error)


def run_command(as_json: bool, action: Callable[[], None]) -> None:
    try:
        action()
    except Exception as e:
        sys.exit(handle_error(e, as_json))


@app.command("list")
def list_packages(
    kind: Optional[PackageKind] = KindOption,
    as_json: bool = JsonOption,
) -> None:
    """List installed packages (formulae first, then casks)."""
    def action() -> None:
        pkgs = Repository().list(kind)
        if as_json:
            print_json([p.to_dict() for p in pkgs])
        else:
            console.print(package_table(pkgs, show_state=False))

    run_command(as_json, action)


@app.command()
def search(
    term: str,
    kind: Optional[PackageKind] = KindOption,
    as_json: bool = JsonOption,
) -> None:
    """Search brew and show whether each hit is installed."""
    def action() -> None:
        pkgs = Repository().search(term, kind)
        if as_json:
            print_json([p.to_dict() for p in pkgs])
        elif pkgs:
            console.print(package_table(pkgs))
        else:
            console.print(f"No packages found for '{term}'", style="yellow", markup=False)

    run_command(as_json, action)


@app.command()
def info(
    name: str,
    kind: Optional[PackageKind] = KindOption,
    as_json: bool = JsonOption,
) -> None:
    """Show whether a package is installed, and as which kind."""
    def action() -> None:
        pkg = Repository().classify(name, kind)
        if as_json:
            print_json(pkg.to_dict())
        else:
            console.print(package_details(pkg))

    run_command(as_json, action)


@app.command()
def install(
    name: str,
    kind: Optional[PackageKind] = KindOption,
    as_json: bool = JsonOption,
) -> None:
    """Install a package that is not installed yet."""
    def action() -> None:
        pkg = Repository().install(require_not_installed(name, kind))
        if as_json:
            print_json(pkg.to_dict())
        else:
            console.print(transition_message("Installed", pkg))

    run_command(as_json, action)


@app.command()
def uninstall(
    name: str,
    kind: Optional[PackageKind] = KindOption,
    as_json: bool = JsonOption,
) -> None:
    """Uninstall an installed package."""
    def action() -> None:
        pkg = Repository().uninstall(require_installed(name, kind))
        if as_json:
            print_json(pkg.to_dict())
        else:
            console.print(transition_message("Uninstalled", pkg))

    run_command(as_json, action)


@app.command()
def reinstall(
    name: str,
    kind: Optional[PackageKind] = KindOption,
    as_json: bool = JsonOption,
) -> None:
    """Reinstall an installed package."""
    def action() -> None:
        pkg = Repository().reinstall(require_installed(name, kind))
        if as_json:
            print_json(pkg.to_dict())
        else:
            console.print(transition_message("Reinstalled", pkg))

    run_command(as_json, action)


if __name__ == "__main__":
    app()
