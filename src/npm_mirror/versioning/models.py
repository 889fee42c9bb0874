"""Data models for manifests, demand sets and resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple


class DependencyType(Enum):
    """Dependency sections recognised in a package.json."""
    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"
    PEER_DEPENDENCIES = "peerDependencies"
    OPTIONAL_DEPENDENCIES = "optionalDependencies"


DEFAULT_DEPENDENCY_TYPES: Tuple[DependencyType, ...] = (
    DependencyType.DEPENDENCIES,
    DependencyType.DEV_DEPENDENCIES,
    DependencyType.PEER_DEPENDENCIES,
)

# dependency name -> requested specifiers
DemandSet = Dict[str, Set[str]]
# dependency name -> exact versions (or passthrough URL tokens)
ResolvedSet = Dict[str, Set[str]]


def _section(document: Mapping[str, Any], key: str) -> Optional[Dict[str, str]]:
    """Return a cleaned dependency section, ``None`` when the key is absent."""
    if key not in document:
        return None
    raw = document[key]
    if not isinstance(raw, Mapping):
        return {}
    return {
        str(name): spec
        for name, spec in raw.items()
        if isinstance(spec, str)
    }


@dataclass
class Manifest:
    """The parts of a package.json the resolver cares about.

    A section is ``None`` when the manifest does not declare it and ``{}``
    when it is declared but empty (or unusable).
    """
    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: Optional[Dict[str, str]] = None
    devDependencies: Optional[Dict[str, str]] = None  # pylint: disable=invalid-name
    peerDependencies: Optional[Dict[str, str]] = None  # pylint: disable=invalid-name
    optionalDependencies: Optional[Dict[str, str]] = None  # pylint: disable=invalid-name
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, document: Mapping[str, Any], path: Optional[str] = None) -> "Manifest":
        """Build a Manifest from a decoded package.json; unknown keys are ignored."""
        if not isinstance(document, Mapping):
            return cls(path=path)
        name = document.get("name")
        version = document.get("version")
        return cls(
            name=name if isinstance(name, str) else None,
            version=version if isinstance(version, str) else None,
            dependencies=_section(document, DependencyType.DEPENDENCIES.value),
            devDependencies=_section(document, DependencyType.DEV_DEPENDENCIES.value),
            peerDependencies=_section(document, DependencyType.PEER_DEPENDENCIES.value),
            optionalDependencies=_section(document, DependencyType.OPTIONAL_DEPENDENCIES.value),
            path=path,
        )

    def section(self, dep_type: DependencyType) -> Optional[Dict[str, str]]:
        """Return the mapping for ``dep_type`` or None when absent."""
        return getattr(self, dep_type.value)


@dataclass(frozen=True)
class UnresolvedSpecifier:
    """A specifier no published version satisfies."""
    package: str
    specifier: str
    reason: str


@dataclass
class BatchResult:
    """Outcome of one resolution pass."""
    resolved: ResolvedSet = field(default_factory=dict)
    unresolved: List[UnresolvedSpecifier] = field(default_factory=list)
