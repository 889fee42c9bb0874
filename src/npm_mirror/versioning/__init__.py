"""Version resolution: data models, semver helpers and resolvers."""

from .models import (
    DEFAULT_DEPENDENCY_TYPES,
    BatchResult,
    DemandSet,
    DependencyType,
    Manifest,
    ResolvedSet,
    UnresolvedSpecifier,
)

__all__ = [
    "DEFAULT_DEPENDENCY_TYPES",
    "BatchResult",
    "DemandSet",
    "DependencyType",
    "Manifest",
    "ResolvedSet",
    "UnresolvedSpecifier",
]
