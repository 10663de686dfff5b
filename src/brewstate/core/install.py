"""State transitions: install, uninstall and reinstall."""

from __future__ import annotations

import time

from brewstate.core.errors import InstallError, ReInstallError, TransitionError, UnInstallError
from brewstate.core.logging import get_logger
from brewstate.core.models import InstalledPackage, NotInstalledPackage
from brewstate.core.package import installed_unchecked, not_installed_unchecked
from brewstate.core.shell import run_capture

log = get_logger(__name__)


def _require_state(package: object, expected: type, action: str) -> None:
    if not isinstance(package, expected):
        raise TypeError(
            f"{action} needs a {expected.__name__}, got {type(package).__name__}"
        )


def _run(
    action: str,
    package: InstalledPackage | NotInstalledPackage,
    error_cls: type[TransitionError],
) -> None:
    """Run ``brew <action> <kind flag> <name>``; raise ``error_cls`` on failure."""
    start = time.perf_counter()
    log.info(f"{action}_start", package=package.name, kind=package.kind.value)

    result = run_capture(action, package.kind.flag, package.name)
    duration_ms = int((time.perf_counter() - start) * 1000)

    if not result.ok:
        log.error(
            f"{action}_failed",
            package=package.name,
            kind=package.kind.value,
            returncode=result.returncode,
            error=result.stderr,
            duration_ms=duration_ms
        )
        raise error_cls(result.stderr, package=package.name, kind=package.kind.value)

    log.info(
        f"{action}_complete",
        package=package.name,
        kind=package.kind.value,
        duration_ms=duration_ms
    )


def install(package: NotInstalledPackage) -> InstalledPackage:
    """Install a package that is not installed.

    brew's success exit is taken as proof of the new state, so the result
    is built without another ``brew info`` round trip.

    Raises:
        InstallError: If ``brew install`` fails; carries brew's stderr.
    """
    _require_state(package, NotInstalledPackage, "install")
    _run("install", package, InstallError)
    return installed_unchecked(package.name, package.kind)


def uninstall(package: InstalledPackage) -> NotInstalledPackage:
    """Uninstall an installed package.

    Raises:
        UnInstallError: If ``brew uninstall`` fails; carries brew's stderr.
    """
    _require_state(package, InstalledPackage, "uninstall")
    _run("uninstall", package, UnInstallError)
    return not_installed_unchecked(package.name, package.kind)


def reinstall(package: InstalledPackage) -> InstalledPackage:
    """Reinstall an installed package. The state does not change.

    Raises:
        ReInstallError: If ``brew reinstall`` fails; carries brew's stderr.
    """
    _require_state(package, InstalledPackage, "reinstall")
    _run("reinstall", package, ReInstallError)
    return package
