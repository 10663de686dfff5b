"""Data models for Homebrew package state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from brewstate.core.errors import BrewContractError


class PackageKind(Enum):
    """Enumeration of package kinds."""

    FORMULA = "formula"
    CASK = "cask"

    @property
    def flag(self) -> str:
        """The brew option selecting this kind."""
        return f"--{self.value}"


@dataclass(frozen=True)
class _PackageState:
    """Fields shared by both package states."""

    name: str
    kind: PackageKind

    installed: ClassVar[bool]

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PackageKind):
            raise TypeError(f"kind must be a PackageKind, got {self.kind!r}")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("package name must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "kind": self.kind.value, "installed": self.installed}


@dataclass(frozen=True)
class InstalledPackage(_PackageState):
    """A package brew reports as installed."""

    installed: ClassVar[bool] = True


@dataclass(frozen=True)
class NotInstalledPackage(_PackageState):
    """A package brew knows about but has not installed."""

    installed: ClassVar[bool] = False


Package = Union[InstalledPackage, NotInstalledPackage]


@dataclass
class BrewInfo:
    """The parts of ``brew info --json=v2`` that decide package state."""

    formulae: list[dict[str, Any]] = field(default_factory=list)
    casks: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any, command: str | None = None) -> BrewInfo:
        """Validate the response shape.

        Raises:
            BrewContractError: If either array is missing or not a list of objects.
        """
        if not isinstance(data, dict):
            raise BrewContractError("brew info did not return a JSON object", command=command)

        lists = {}
        for key in ("formulae", "casks"):
            entries = data.get(key)
            if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
                raise BrewContractError(
                    f"brew info response has no '{key}' array of objects",
                    command=command,
                )
            lists[key] = entries

        return cls(formulae=lists["formulae"], casks=lists["casks"])

    def first_entry(self) -> tuple[PackageKind, dict[str, Any]] | None:
        """The entry that decides classification; formulae win over casks."""
        if self.formulae:
            return PackageKind.FORMULA, self.formulae[0]
        if self.casks:
            return PackageKind.CASK, self.casks[0]
        return None

    def entries(self, kind: PackageKind) -> list[dict[str, Any]]:
        return self.formulae if kind is PackageKind.FORMULA else self.casks


def entry_names(kind: PackageKind, entry: dict[str, Any]) -> set[str]:
    """Every name brew may use for an info entry."""
    keys = ("name", "full_name") if kind is PackageKind.FORMULA else ("token", "full_token")
    return {entry[k] for k in keys if isinstance(entry.get(k), str)}


def installed_state(kind: PackageKind, entry: dict[str, Any], command: str | None = None) -> bool:
    """Decide whether an info entry describes an installed package.

    A formula lists its installed kegs, so it is installed when ``installed``
    is a non-empty array. A cask records one version string in ``installed``
    and ``null`` when absent.

    Raises:
        BrewContractError: If ``installed`` is missing or has the wrong type.
    """
    if "installed" not in entry:
        raise BrewContractError(f"{kind.value} info entry has no 'installed' field", command=command)

    installed = entry["installed"]

    if kind is PackageKind.FORMULA:
        if not isinstance(installed, list):
            raise BrewContractError("formula 'installed' field is not an array", command=command)
        return len(installed) > 0

    return isinstance(installed, str)
