"""npm-flavoured semantic version helpers built on ``semantic_version``."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Union

import semantic_version

logger = logging.getLogger(__name__)

SpecType = Union[semantic_version.NpmSpec, semantic_version.SimpleSpec]

# npm tolerates blanks between an operator and its version: ">= 1.0.0", "^ 1.2"
_OPERATOR_GAP = re.compile(r"(\^|~|[<>]=?|=)\s+")


def valid(spec: str) -> Optional[str]:
    """Return the cleaned exact version for ``spec``, or None if it is not one.

    Accepts the ``v`` and ``=`` prefixes npm tolerates on exact versions.
    """
    if not isinstance(spec, str):
        return None
    s = spec.strip()
    if s[:1] == "=":
        s = s[1:].strip()
    if s[:1] in ("v", "V"):
        s = s[1:]
    try:
        return str(semantic_version.Version(s))
    except ValueError:
        return None


def _normalize_spec(spec_str: str) -> str:
    """Normalize npm range syntax (hyphen, x-ranges) into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "1.2.3 - 1.4.5" => ">=1.2.3,<=1.4.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s+-\s+([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        return f">={m.group(1)},<={m.group(2)}"

    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)(\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return spec_str


def parse_range(spec_str: str) -> Optional[SpecType]:
    """Parse an npm range, falling back to a normalized SimpleSpec.

    An empty range means "any version", as in npm.
    """
    raw = _OPERATOR_GAP.sub(r"\1", spec_str.strip()) or "*"
    try:
        return semantic_version.NpmSpec(raw)
    except ValueError:
        pass
    try:
        return semantic_version.SimpleSpec(_normalize_spec(raw))
    except ValueError:
        return None


def _parse_versions(versions: Iterable[str]) -> List[semantic_version.Version]:
    parsed = []
    for v in versions:
        try:
            parsed.append(semantic_version.Version(v))
        except ValueError:
            continue  # Registries occasionally publish junk version keys
    return parsed


def max_satisfying(versions: Iterable[str], spec_str: str) -> Optional[str]:
    """Return the highest version in ``versions`` matching ``spec_str``.

    Returns None when the range cannot be parsed or nothing matches.
    """
    spec = parse_range(spec_str)
    if spec is None:
        logger.debug("Unparseable range: %s", spec_str)
        return None
    best = spec.select(_parse_versions(versions))
    return str(best) if best is not None else None
