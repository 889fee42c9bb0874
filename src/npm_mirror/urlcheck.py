"""Classify dependency specifiers that point somewhere other than the registry."""

from __future__ import annotations

import re

_WEB_URL = re.compile(r"^https?://", re.IGNORECASE)
_GIT_URL = re.compile(
    r"^(git://|git\+(ssh|https?|file)://|ssh://|git@[^:/\s]+:|(github|gitlab|bitbucket|gist):)",
    re.IGNORECASE,
)
_GITHUB_SHORTHAND = re.compile(r"^[A-Za-z0-9][\w.-]*/[\w.-]+(#\S*)?$")
_FILE_URL = re.compile(r"^(file:|\.{1,2}/|/|~/)", re.IGNORECASE)


def is_file_url(spec: str) -> bool:
    """Return True for ``file:`` specifiers and local paths."""
    return isinstance(spec, str) and bool(_FILE_URL.match(spec.strip()))


def is_web_url(spec: str) -> bool:
    """Return True for plain http(s) URLs, e.g. a tarball link."""
    return isinstance(spec, str) and bool(_WEB_URL.match(spec.strip()))


def is_git_url(spec: str) -> bool:
    """Return True for git remotes and hosted-git shorthands."""
    if not isinstance(spec, str):
        return False
    spec = spec.strip()
    return bool(_GIT_URL.match(spec) or _GITHUB_SHORTHAND.match(spec))
