"""Resolve the concrete npm package versions a source tree needs to mirror."""

from .errors import (
    ConfigError,
    MalformedMetadata,
    ManifestError,
    MirrorError,
    RegistryNotFound,
    ResolutionTimeout,
    TransportFailure,
)
from .package import dependencies, merge_dependencies, tarball_plan, tarball_url, url, version_count
from .urlcheck import is_file_url, is_git_url, is_web_url
from .versioning.models import (
    DEFAULT_DEPENDENCY_TYPES,
    BatchResult,
    DependencyType,
    Manifest,
    UnresolvedSpecifier,
)
from .versioning.resolver import BatchResolver, VersionResolver, resolve_versions
from .manifest import demand_for_tree, find_manifests, load_manifest
from .config import MirrorConfig, load_config

__version__ = "0.1.0"
