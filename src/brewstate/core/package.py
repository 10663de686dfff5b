"""Classify package names into installed / not-installed states."""

from __future__ import annotations

import time
from typing import Iterable, List, Optional

from brewstate.core.errors import (
    AlreadyInstalledError,
    BrewContractError,
    InstalledPackageCreateError,
    NotInstalledError,
    PackageCreateError,
)
from brewstate.core.logging import get_logger
from brewstate.core.models import (
    BrewInfo,
    InstalledPackage,
    NotInstalledPackage,
    Package,
    PackageKind,
    entry_names,
    installed_state,
)
from brewstate.core.shell import parse_json, run_capture, run_json

log = get_logger(__name__)

BATCH_SIZE = 30


def info_args(kind: Optional[PackageKind], *names: str) -> list[str]:
    """Arguments for ``brew info``, scoped to ``kind`` when given."""
    if kind is None:
        return ["info", "--json=v2", *names]
    return ["info", kind.flag, "--json=v2", *names]


def installed_unchecked(name: str, kind: PackageKind) -> InstalledPackage:
    """Build an InstalledPackage without asking brew.

    Only for names that already come from a trusted source, such as the
    output of ``brew list``.
    """
    return InstalledPackage(name, kind)


def not_installed_unchecked(name: str, kind: PackageKind) -> NotInstalledPackage:
    """Build a NotInstalledPackage without asking brew."""
    return NotInstalledPackage(name, kind)


def _from_state(name: str, kind: PackageKind, is_installed: bool) -> Package:
    if is_installed:
        return installed_unchecked(name, kind)
    return not_installed_unchecked(name, kind)


def classify(name: str, kind: Optional[PackageKind] = None) -> Package:
    """Ask brew whether ``name`` is installed.

    Without a kind, brew picks the match itself and a formula wins over a
    cask of the same name.

    Args:
        name: Package name.
        kind: Optional kind to scope the lookup.

    Returns:
        An InstalledPackage or NotInstalledPackage with the kind brew reported.

    Raises:
        PackageCreateError: If ``brew info`` fails; carries brew's stderr.
        BrewContractError: If brew succeeded but returned no usable entry.
    """
    if not name or not name.strip():
        raise ValueError("package name must be a non-empty string")

    start = time.perf_counter()
    kind_str = kind.value if kind else None
    log.debug("classify_start", package=name, kind=kind_str)

    result = run_capture(*info_args(kind, name))
    if not result.ok:
        log.warning(
            "classify_failed",
            package=name,
            kind=kind_str,
            returncode=result.returncode,
            error=result.stderr,
        )
        raise PackageCreateError(result.stderr, package=name, kind=kind_str)

    info = BrewInfo.from_json(parse_json(result), command=result.command)
    first = info.first_entry()
    if first is None:
        raise BrewContractError(
            "brew info succeeded without returning any formula or cask",
            command=result.command,
        )

    found_kind, entry = first
    pkg = _from_state(name, found_kind, installed_state(found_kind, entry, command=result.command))

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "classify_complete",
        package=name,
        kind=found_kind.value,
        installed=pkg.installed,
        duration_ms=duration_ms
    )

    return pkg


def require_installed(name: str, kind: Optional[PackageKind] = None) -> InstalledPackage:
    """Classify ``name`` and insist that it is installed.

    Raises:
        InstalledPackageCreateError: If classification failed; chained to
            the PackageCreateError.
        NotInstalledError: If brew knows the package but it is not installed.
    """
    try:
        pkg = classify(name, kind)
    except PackageCreateError as e:
        raise InstalledPackageCreateError(e.message, package=name, kind=e.context.get("kind")) from e

    if not isinstance(pkg, InstalledPackage):
        raise NotInstalledError(package=name, kind=pkg.kind.value)

    return pkg


def require_not_installed(name: str, kind: Optional[PackageKind] = None) -> NotInstalledPackage:
    """Classify ``name`` and insist that it is not installed yet.

    Raises:
        PackageCreateError: If classification failed.
        AlreadyInstalledError: If the package is already installed.
    """
    pkg = classify(name, kind)

    if not isinstance(pkg, NotInstalledPackage):
        raise AlreadyInstalledError(package=name, kind=pkg.kind.value)

    return pkg


def classify_many(names: Iterable[str], kind: PackageKind) -> List[Package]:
    """Classify many names of one kind with batched ``brew info`` calls.

    Results keep the order of ``names``. Names brew returns no entry for
    are skipped.

    Raises:
        BrewCommandError: If a batched ``brew info`` fails.
    """
    names = list(dict.fromkeys(names))
    start = time.perf_counter()
    log.debug("classify_many_start", kind=kind.value, count=len(names))

    states: dict[str, bool] = {}
    for i in range(0, len(names), BATCH_SIZE):
        batch = names[i : i + BATCH_SIZE]
        args = info_args(kind, *batch)
        command = " ".join(["brew", *args])
        info = BrewInfo.from_json(run_json(*args), command=command)

        for entry in info.entries(kind):
            is_installed = installed_state(kind, entry, command=command)
            for alias in entry_names(kind, entry):
                states[alias] = is_installed

    pkgs: List[Package] = []
    for name in names:
        if name not in states:
            log.warning("classify_many_missing", package=name, kind=kind.value)
            continue
        pkgs.append(_from_state(name, kind, states[name]))

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "classify_many_complete",
        kind=kind.value,
        count=len(pkgs),
        duration_ms=duration_ms
    )

    return pkgs
