"""Resolve loose npm specifiers to concrete versions using registry metadata."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from .. import package as pkg
from .. import urlcheck
from ..common.http_client import RegistryClient
from ..common.logging_utils import Timer, configure_logging, extra_context, is_debug_enabled, safe_url
from ..config import MirrorConfig
from ..constants import Constants
from ..errors import MalformedMetadata, ResolutionTimeout
from . import semver
from .models import BatchResult, DemandSet, ResolvedSet, UnresolvedSpecifier

logger = logging.getLogger(__name__)

UNSATISFIABLE = "no published version satisfies specifier"


class VersionResolver:
    """Resolve one (package, specifier) pair.

    Exact versions and git/web URLs are answered locally; ranges and
    dist-tags need the package root document from the registry.
    """

    def __init__(self, downloader: Any):
        """Initialize the resolver.

        Args:
            downloader: Object exposing ``async download(url) -> str``.
        """
        self.downloader = downloader

    async def resolve(self, hostname: str, package: str, version: str) -> Optional[str]:
        """Return the concrete version for ``version``, or None if nothing satisfies it.

        Raises:
            TransportFailure: The metadata could not be fetched or parsed.
        """
        exact = semver.valid(version)
        if exact:
            # Not a range, so the registry has nothing to add.
            return exact

        if urlcheck.is_web_url(version) or urlcheck.is_git_url(version):
            return version

        metadata = await self.fetch_metadata(hostname, package)
        resolved = self.pick(metadata, version)
        if resolved is None:
            logger.warning(
                "bad version - %s@%s",
                package,
                version,
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    outcome="unsatisfiable",
                    package=package,
                    specifier=version,
                ),
            )
        return resolved

    async def fetch_metadata(self, hostname: str, package: str) -> Dict[str, Any]:
        """Download and decode the package root document."""
        package_root_url = pkg.url(hostname, package)
        with Timer() as t:
            data = await self.downloader.download(package_root_url)
        try:
            package_root = json.loads(data)
        except (TypeError, ValueError) as exc:
            raise MalformedMetadata(
                f"Invalid JSON for {package}: {exc}", url=package_root_url
            ) from exc
        if not isinstance(package_root, dict) or not isinstance(package_root.get("versions"), dict):
            raise MalformedMetadata(f"No versions listed for {package}", url=package_root_url)

        if is_debug_enabled(logger):
            logger.debug(
                "Fetched package root",
                extra=extra_context(
                    event="metadata",
                    component="resolver",
                    package=package,
                    candidate_count=len(package_root["versions"]),
                    duration_ms=t.duration_ms(),
                    target=safe_url(package_root_url),
                ),
            )
        return package_root

    def pick(self, metadata: Dict[str, Any], version: str) -> Optional[str]:
        """Choose a version from the package root: dist-tag first, then max satisfying."""
        tags = metadata.get("dist-tags")
        tag = version.strip()
        if isinstance(tags, dict) and tag in tags:
            # A tag pointing at something that is not a version satisfies nothing.
            return semver.valid(tags[tag])
        return semver.max_satisfying(list(metadata["versions"].keys()), version)


class BatchResolver:
    """Resolve every specifier of a demand set concurrently.

    The batch has a single outcome: either the full result, or the first
    error raised by any resolution, after which every sibling still in
    flight is cancelled.
    """

    def __init__(
        self,
        resolver: Optional[VersionResolver] = None,
        downloader: Any = None,
        max_concurrency: int = Constants.MAX_CONCURRENCY,
        timeout: Optional[float] = Constants.BATCH_TIMEOUT_SEC,
    ):
        if resolver is None:
            if downloader is None:
                raise ValueError("BatchResolver needs a resolver or a downloader")
            resolver = VersionResolver(downloader)
        self.resolver = resolver
        self.max_concurrency = max(1, max_concurrency)
        self.timeout = timeout

    async def resolve_all(self, hostname: str, package_to_versions: DemandSet) -> ResolvedSet:
        """Resolve the demand set and return only the resolved versions."""
        return (await self.resolve_all_detailed(hostname, package_to_versions)).resolved

    async def resolve_all_detailed(self, hostname: str, package_to_versions: DemandSet) -> BatchResult:
        """Resolve the demand set, also reporting unsatisfiable specifiers."""
        result = BatchResult()
        count = pkg.version_count(package_to_versions)
        if count == 0:
            return result

        logger.info("Resolving %d specifiers across %d packages", count, len(package_to_versions))
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _one(package: str, loose: str) -> Tuple[str, str, Optional[str]]:
            async with semaphore:
                return package, loose, await self.resolver.resolve(hostname, package, loose)

        tasks: List["asyncio.Task[Tuple[str, str, Optional[str]]]"] = []
        for package in sorted(package_to_versions):
            result.resolved[package] = set()
            for loose in sorted(package_to_versions[package]):
                tasks.append(asyncio.ensure_future(_one(package, loose)))

        with Timer() as t:
            try:
                done, pending = await asyncio.wait(
                    tasks, timeout=self.timeout, return_when=asyncio.FIRST_EXCEPTION
                )
            except BaseException:
                await _cancel(tasks)
                raise

        if pending:
            await _cancel(pending)

        # Collect every exception so none is reported as never retrieved;
        # the first in submission order is the one surfaced.
        errors = [task.exception() for task in tasks if task in done and task.exception() is not None]
        if errors:
            logger.error(
                "Resolution batch failed: %s",
                errors[0],
                extra=extra_context(
                    event="batch",
                    component="resolver",
                    outcome="error",
                    cancelled=len(pending),
                ),
            )
            raise errors[0]
        if pending:
            raise ResolutionTimeout(
                f"{len(pending)} of {count} resolutions unfinished after {self.timeout} seconds"
            )

        for task in tasks:
            package, loose, version = task.result()
            if version is None:
                result.unresolved.append(UnresolvedSpecifier(package, loose, UNSATISFIABLE))
            else:
                result.resolved[package].add(version)

        logger.info(
            "Resolved %d specifiers (%d unsatisfiable)",
            count - len(result.unresolved),
            len(result.unresolved),
            extra=extra_context(
                event="batch",
                component="resolver",
                outcome="success",
                duration_ms=t.duration_ms(),
            ),
        )
        return result


async def _cancel(tasks) -> None:
    """Cancel ``tasks`` and wait until they have all settled."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def resolve_versions(
    hostname: Optional[str],
    package_to_versions: DemandSet,
    client: Any = None,
    config: Optional[MirrorConfig] = None,
) -> ResolvedSet:
    """Run a batch to completion from synchronous code.

    ``hostname`` falls back to the configured registry. A ``RegistryClient``
    built from ``config`` is opened (and closed) when ``client`` is None.
    An explicit ``config`` also sets the log level.
    """
    if config is None:
        config = MirrorConfig()
    else:
        configure_logging(config.log_level)
    hostname = hostname or config.registry

    async def _run(downloader: Any) -> ResolvedSet:
        batch = BatchResolver(
            downloader=downloader,
            max_concurrency=config.max_concurrency,
            timeout=config.batch_timeout,
        )
        return await batch.resolve_all(hostname, package_to_versions)

    async def _run_with_own_client() -> ResolvedSet:
        async with RegistryClient(
            timeout=config.request_timeout,
            retry_max=config.retry_max,
            retry_base_delay=config.retry_base_delay,
        ) as own_client:
            return await _run(own_client)

    if client is not None:
        return asyncio.run(_run(client))
    return asyncio.run(_run_with_own_client())
