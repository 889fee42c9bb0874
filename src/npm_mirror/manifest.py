"""Load package.json files and build a demand set for a source tree."""

from __future__ import annotations

import json
import logging
import os
from typing import Iterable, List, Optional

from .common.logging_utils import extra_context, log_discovered_files
from .constants import Constants
from .errors import ManifestError
from .package import DependencyTypeArg, dependencies, merge_dependencies
from .versioning.models import DemandSet, Manifest

logger = logging.getLogger(__name__)


def load_manifest(path: str) -> Manifest:
    """Read and decode a package.json.

    Raises:
        ManifestError: The file is unreadable, not JSON, or not a JSON object.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            document = json.load(fh)
    except OSError as exc:
        raise ManifestError(path, f"cannot read file: {exc}") from exc
    except ValueError as exc:
        raise ManifestError(path, f"invalid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ManifestError(path, "top-level value is not an object")
    return Manifest.from_dict(document, path=path)


def find_manifests(root: str, recursive: bool = True, include_node_modules: bool = False) -> List[str]:
    """Return the package.json paths under ``root``, sorted.

    Hidden directories are skipped, and so is node_modules unless
    ``include_node_modules`` is set.
    """
    if os.path.isfile(root):
        return [root]
    found: List[str] = []
    if not recursive:
        candidate = os.path.join(root, Constants.PACKAGE_JSON_FILE)
        return [candidate] if os.path.isfile(candidate) else []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if not d.startswith(".")
            and (include_node_modules or d != Constants.NODE_MODULES_DIR)
        )
        if Constants.PACKAGE_JSON_FILE in filenames:
            found.append(os.path.join(dirpath, Constants.PACKAGE_JSON_FILE))
    found.sort()
    log_discovered_files(logger, root, found)
    return found


def demand_for_tree(
    root: str,
    types: Optional[Iterable[DependencyTypeArg]] = None,
    recursive: bool = True,
    include_node_modules: bool = False,
    strict: bool = False,
) -> DemandSet:
    """Extract and merge the dependencies of every manifest under ``root``.

    Unreadable manifests are logged and skipped unless ``strict`` is set.
    """
    types = list(types) if types is not None else None
    per_manifest = []
    for path in find_manifests(root, recursive=recursive, include_node_modules=include_node_modules):
        try:
            manifest = load_manifest(path)
        except ManifestError as exc:
            if strict:
                raise
            logger.warning(
                "Skipping manifest: %s",
                exc,
                extra=extra_context(event="parse", component="manifest", outcome="skipped", path=path),
            )
            continue
        per_manifest.append(dependencies(manifest, types))
    return merge_dependencies(per_manifest)
