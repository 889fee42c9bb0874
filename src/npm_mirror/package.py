"""Helpers turning package manifests into registry lookups.

``dependencies`` reads one manifest, ``merge_dependencies`` folds many of
those results into a single demand set, and ``url``/``tarball_url`` build
registry locations following the npmjs path conventions.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from . import urlcheck
from .versioning import semver
from .versioning.models import (
    DEFAULT_DEPENDENCY_TYPES,
    DemandSet,
    DependencyType,
    Manifest,
    ResolvedSet,
)

logger = logging.getLogger(__name__)

DependencyTypeArg = Union[DependencyType, str]


def _as_dependency_type(dep_type: DependencyTypeArg) -> Optional[DependencyType]:
    if isinstance(dep_type, DependencyType):
        return dep_type
    try:
        return DependencyType(dep_type)
    except ValueError:
        logger.debug("Ignoring unknown dependency type: %s", dep_type)
        return None


def dependencies(
    manifest: Union[Manifest, Mapping[str, Any]],
    types: Optional[Iterable[DependencyTypeArg]] = None,
) -> DemandSet:
    """Collect the specifiers a manifest declares.

    Args:
        manifest: Manifest or decoded package.json document.
        types: Dependency sections to scan; defaults to runtime,
            development and peer dependencies.

    Returns:
        Map from dependency name to the set of requested specifiers.
    """
    if not isinstance(manifest, Manifest):
        manifest = Manifest.from_dict(manifest)
    if types is None:
        types = DEFAULT_DEPENDENCY_TYPES

    deps: DemandSet = {}
    for raw_type in types:
        dep_type = _as_dependency_type(raw_type)
        if dep_type is None:
            continue
        section = manifest.section(dep_type)
        if section is None:
            continue
        for name, spec in section.items():
            deps.setdefault(name, set()).add(spec)
    return deps


def merge_dependencies(demand_sets: Iterable[DemandSet]) -> DemandSet:
    """Merge per-manifest demand sets into one.

    File specifiers are dropped: those packages are already on disk and must
    never be looked up in the registry. A name left with no specifiers is
    omitted.
    """
    result: DemandSet = {}
    for package_to_versions in demand_sets:
        for package, versions in package_to_versions.items():
            wanted = {v for v in versions if not urlcheck.is_file_url(v)}
            if not wanted:
                continue
            result.setdefault(package, set()).update(wanted)
    return result


def _base(hostname: str) -> str:
    return hostname if hostname.endswith("/") else hostname + "/"


def url(hostname: str, package: str, version: Optional[str] = None) -> str:
    """Build a registry metadata URL.

    Args:
        hostname: npm registry.
        package: name of package.
        version: optional strict version.
    """
    resource = package
    if version:
        resource = resource + "/" + version
    return urllib.parse.urljoin(_base(hostname), resource)


def tarball_url(hostname: str, package: str, version: str) -> str:
    """Use the npmjs tarball name scheme to build a tarball URL."""
    tarball = f"{package}-{version}.tgz"
    return urllib.parse.urljoin(_base(hostname), "/".join([package, version, tarball]))


def version_count(package_to_versions: Mapping[str, Iterable[str]]) -> int:
    """Count (package, specifier) pairs."""
    return sum(len(set(versions)) for versions in package_to_versions.values())


def tarball_plan(hostname: str, resolved: ResolvedSet) -> List[Tuple[str, str, str]]:
    """List ``(package, version, tarball_url)`` for every exact resolved version.

    URL tokens (git/web dependencies) are not registry tarballs and are skipped.
    """
    plan = []
    for package in sorted(resolved):
        for version in sorted(resolved[package]):
            if semver.valid(version) is None:
                continue
            plan.append((package, version, tarball_url(hostname, package, version)))
    return plan
