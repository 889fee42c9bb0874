"""Exceptions raised while resolving a dependency tree."""

from __future__ import annotations

from typing import Optional


class MirrorError(Exception):
    """Base class for resolver errors."""


class ConfigError(MirrorError):
    """Configuration file could not be parsed."""


class ManifestError(MirrorError):
    """A package.json could not be read or decoded."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class TransportFailure(MirrorError):
    """Registry metadata could not be retrieved.

    Fatal to the batch that triggered it.
    """

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class RegistryNotFound(TransportFailure):
    """The registry has no document for the requested package."""


class MalformedMetadata(TransportFailure):
    """The registry answered with something that is not a package root."""


class ResolutionTimeout(TransportFailure):
    """A batch did not finish before its deadline."""
