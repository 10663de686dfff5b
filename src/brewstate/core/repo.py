"""Repository exposing the package commands over live brew state."""

from __future__ import annotations

import re
import time
from typing import List, Optional

from brewstate.core import install as transitions
from brewstate.core.errors import BrewCommandError
from brewstate.core.logging import get_logger
from brewstate.core.models import InstalledPackage, NotInstalledPackage, Package, PackageKind
from brewstate.core.package import classify, classify_many, installed_unchecked
from brewstate.core.shell import run_capture

log = get_logger(__name__)

KIND_ORDER = (PackageKind.FORMULA, PackageKind.CASK)

NO_MATCHES = re.compile(r"No (formulae or casks|formulae|casks) found")


class Repository:
    """Package commands, one method per command.

    Nothing is cached: every call reads brew's current state.
    """

    def list(self, kind: Optional[PackageKind] = None) -> List[InstalledPackage]:
        """List installed packages, formulae before casks.

        Args:
            kind: Optional filter for package kind (formula or cask).

        Returns:
            InstalledPackage values in brew's listing order.

        Raises:
            BrewCommandError: If ``brew list`` fails.
        """
        start = time.perf_counter()
        kind_filter = kind.value if kind else "all"
        log.info("list_start", kind_filter=kind_filter)

        pkgs: List[InstalledPackage] = []
        for k in KIND_ORDER:
            if kind in (None, k):
                pkgs.extend(self._list_kind(k))

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info("list_complete", kind_filter=kind_filter, count=len(pkgs), duration_ms=duration_ms)

        return pkgs

    def _list_kind(self, kind: PackageKind) -> List[InstalledPackage]:
        result = run_capture("list", kind.flag)
        if not result.ok:
            log.error("list_failed", kind=kind.value, returncode=result.returncode, error=result.stderr)
            raise BrewCommandError(
                command=result.command,
                returncode=result.returncode,
                error=result.stderr.strip(),
            )

        # brew list output is itself the proof of installation
        return [installed_unchecked(name, kind) for name in result.lines()]

    def search(self, term: str, kind: Optional[PackageKind] = None) -> List[Package]:
        """Search brew for ``term`` and classify every hit.

        Hits are classified with batched ``brew info`` calls so each result
        carries its installed state.

        Args:
            term: Search term or /regex/ as brew accepts it.
            kind: Optional filter for package kind.

        Returns:
            Classified packages, formula hits before cask hits.

        Raises:
            BrewCommandError: If ``brew search`` or ``brew info`` fails.
        """
        start = time.perf_counter()
        kind_filter = kind.value if kind else "all"
        log.info("search_start", term=term, kind_filter=kind_filter)

        pkgs: List[Package] = []
        for k in KIND_ORDER:
            if kind in (None, k):
                names = self._search_kind(term, k)
                if not names:
                    continue
                try:
                    pkgs.extend(classify_many(names, k))
                except BrewCommandError as e:
                    raise e.with_context(term=term)

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "search_complete",
            term=term,
            kind_filter=kind_filter,
            count=len(pkgs),
            duration_ms=duration_ms
        )

        return pkgs

    def _search_kind(self, term: str, kind: PackageKind) -> List[str]:
        result = run_capture("search", kind.flag, term)
        names = [line for line in result.lines() if not line.startswith("==>")]

        if result.ok:
            return names

        # brew exits 1 with nothing on stdout when there are no matches
        if not names and NO_MATCHES.search(result.stderr):
            log.debug("search_no_results", term=term, kind=kind.value, error=result.stderr)
            return []

        log.error("search_failed", term=term, kind=kind.value, returncode=result.returncode, error=result.stderr)
        raise BrewCommandError(
            command=result.command,
            returncode=result.returncode,
            error=result.stderr.strip(),
        )

    def classify(self, name: str, kind: Optional[PackageKind] = None) -> Package:
        """Classify a single package name. See ``brewstate.core.package.classify``."""
        return classify(name, kind)

    def install(self, package: NotInstalledPackage) -> InstalledPackage:
        return transitions.install(package)

    def uninstall(self, package: InstalledPackage) -> NotInstalledPackage:
        return transitions.uninstall(package)

    def reinstall(self, package: InstalledPackage) -> InstalledPackage:
        return transitions.reinstall(package)
