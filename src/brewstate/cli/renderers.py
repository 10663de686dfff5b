"""Renderers for displaying package state in the CLI using Rich."""

from __future__ import annotations

from typing import Iterable

from rich import box
from rich.console import Console
from rich.table import Table

from brewstate.core.models import Package

console = Console()


def state_to_str(pkg: Package) -> str:
    """Colour-coded installed state."""
    if pkg.installed:
        return "[green]Installed[/green]"
    return "[dim]Not installed[/dim]"


def package_table(pkgs: Iterable[Package], show_state: bool = True) -> Table:
    """Create a Rich Table listing packages.

    Args:
        pkgs: Packages to display, in display order.
        show_state: Whether to add the installed-state column.

    Returns:
        A Rich Table with one row per package.
    """
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Kind", style="bold")
    table.add_column("Name", style="bold")
    if show_state:
        table.add_column("State")

    for p in pkgs:
        row = [p.kind.value, p.name]
        if show_state:
            row.append(state_to_str(p))
        table.add_row(*row)

    return table


def package_details(pkg: Package) -> Table:
    """Display the classification of a single package.

    Args:
        pkg: The package to display.

    Returns:
        A two-column Rich Table.
    """
    t = Table(box=box.MINIMAL_HEAVY_HEAD)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Name", pkg.name)
    t.add_row("Kind", pkg.kind.value)
    t.add_row("State", state_to_str(pkg))

    return t


def transition_message(action: str, pkg: Package) -> str:
    """One-line confirmation after a successful transition."""
    return f"✅ {action} {pkg.kind.value} [bold]{pkg.name}[/bold]"
