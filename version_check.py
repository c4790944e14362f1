"""Version range guards used before build and install steps.

Constraints use the comparator syntax accepted by ``engines`` entries in a
``package.json``: ``>=18.0.0``, ``^3.0.0``, ``~1.2``, ``1.x``,
``1.2.3 - 2.3.4`` and alternatives joined with ``||``.  Each range is
expanded into plain ``(operator, SemVer)`` comparators.  Release numbers are
ordered with :class:`packaging.version.Version`; pre-release tags follow
semver precedence rather than PEP 440.
"""

import logging
import operator
import re
from functools import total_ordering

from packaging.version import InvalidVersion, Version

from errors import ConfigError

logger = logging.getLogger(__name__)

_OPS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
}

_PARTIAL = re.compile(
    r"^v?(?P<major>\d+|[xX*])"
    r"(?:\.(?P<minor>\d+|[xX*]))?"
    r"(?:\.(?P<patch>\d+|[xX*]))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)
_COMPARATOR = re.compile(r"^(?P<op><=|>=|<|>|=|~>|~|\^)?(?P<ver>.*)$")
_HYPHEN = re.compile(r"^(?P<lo>\S+)\s+-\s+(?P<hi>\S+)$")
_OP_SPACE = re.compile(r"(<=|>=|<|>|=|~>|~|\^)\s+")
_WILDCARDS = ("x", "X", "*")

# Characters removed before handing a version to the version manager
_RANGE_CHARS = re.compile(r"[>=^~]")
_COMPOUND = re.compile(r"\s|<|\|")


def _identifier_key(ident: str):
    # Numeric identifiers sort below alphanumeric ones
    if ident.isdigit():
        return (0, int(ident), "")
    return (1, 0, ident)


@total_ordering
class SemVer:
    """A ``major.minor.patch[-pre]`` version ordered like semver.

    The release part is a :class:`packaging.version.Version`; pre-release
    identifiers are compared field by field, numeric below alphanumeric,
    and any pre-release sorts below its plain release.
    """

    __slots__ = ("release", "pre")

    def __init__(self, release: Version, pre: tuple[str, ...] = ()):
        self.release = release
        self.pre = pre

    @classmethod
    def parse(cls, text: str) -> "SemVer":
        major, minor, patch, pre = _parse_partial(text)
        if patch is None:
            raise ConfigError(f"Invalid version '{text}'")
        return _version(major, minor, patch, pre)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    def _key(self):
        if not self.pre:
            return (self.release, (1,))
        return (self.release, (0, tuple(_identifier_key(i) for i in self.pre)))

    def __eq__(self, other):
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        text = str(self.release)
        return f"{text}-{'.'.join(self.pre)}" if self.pre else text

    def __repr__(self):
        return f"SemVer('{self}')"


def _version(major, minor=0, patch=0, pre=None) -> SemVer:
    identifiers = tuple(pre.split(".")) if pre else ()
    if any(not ident for ident in identifiers):
        raise ConfigError(f"Invalid pre-release '{pre}'")
    try:
        release = Version(f"{major}.{minor}.{patch}")
    except InvalidVersion as exc:  # pragma: no cover - digits only
        raise ConfigError(f"Invalid version '{major}.{minor}.{patch}'") from exc
    return SemVer(release, identifiers)


# Matches nothing; used for ``>*`` and ``<*``
_NOTHING = [("<", _version(0))]


def _parse_partial(text: str):
    """Return ``(major, minor, patch, pre)`` with ``None`` for wildcards."""

    m = _PARTIAL.match(text)
    if m is None:
        raise ConfigError(f"Invalid version '{text}' in range")
    parts = []
    for key in ("major", "minor", "patch"):
        val = m.group(key)
        parts.append(None if val is None or val in _WILDCARDS else int(val))
    # Anything after a wildcard is a wildcard too
    for i, val in enumerate(parts):
        if val is None:
            parts[i + 1 :] = [None] * (len(parts) - i - 1)
            break
    pre = m.group("pre") if parts[2] is not None else None
    return parts[0], parts[1], parts[2], pre


def _bump(major, minor):
    """Smallest version above a partial ``major[.minor]``."""
    if minor is None:
        return _version(major + 1)
    return _version(major, minor + 1)


def _expand(op: str, partial) -> list[tuple[str, SemVer]]:
    major, minor, patch, pre = partial

    if op in ("~", "~>"):
        if major is None:
            return []
        if minor is None:
            return [(">=", _version(major)), ("<", _version(major + 1))]
        return [
            (">=", _version(major, minor, patch or 0, pre)),
            ("<", _version(major, minor + 1)),
        ]

    if op == "^":
        if major is None:
            return []
        if minor is None:
            return [(">=", _version(major)), ("<", _version(major + 1))]
        if patch is None:
            upper = _version(major + 1) if major else _version(0, minor + 1)
            return [(">=", _version(major, minor)), ("<", upper)]
        if major:
            upper = _version(major + 1)
        elif minor:
            upper = _version(0, minor + 1)
        else:
            upper = _version(0, 0, patch + 1)
        return [(">=", _version(major, minor, patch, pre)), ("<", upper)]

    if op in ("", "="):
        if major is None:
            return []
        if patch is None:
            return [(">=", _version(major, minor or 0)), ("<", _bump(major, minor))]
        return [("=", _version(major, minor, patch, pre))]

    if major is None:
        return [] if op in (">=", "<=") else list(_NOTHING)
    if patch is None:
        if op == ">":
            return [(">=", _bump(major, minor))]
        if op == "<=":
            return [("<", _bump(major, minor))]
        return [(op, _version(major, minor or 0))]
    return [(op, _version(major, minor, patch, pre))]


def _expand_hyphen(lo: str, hi: str) -> list[tuple[str, SemVer]]:
    comparators = []
    major, minor, patch, pre = _parse_partial(lo)
    if major is not None:
        comparators.append((">=", _version(major, minor or 0, patch or 0, pre)))
    major, minor, patch, pre = _parse_partial(hi)
    if major is not None:
        if patch is None:
            comparators.append(("<", _bump(major, minor)))
        else:
            comparators.append(("<=", _version(major, minor, patch, pre)))
    return comparators


def parse_range(constraint: str) -> list[list[tuple[str, SemVer]]]:
    """Expand ``constraint`` into alternatives of ``(operator, SemVer)`` pairs.

    An empty alternative matches every version.

    Raises
    ------
    ConfigError
        If a component of the range cannot be parsed.
    """

    alternatives = []
    for part in constraint.split("||"):
        part = _OP_SPACE.sub(r"\1", part.strip())
        hyphen = _HYPHEN.match(part)
        if hyphen:
            alternatives.append(_expand_hyphen(hyphen.group("lo"), hyphen.group("hi")))
            continue
        comparators = []
        for token in part.split():
            m = _COMPARATOR.match(token)
            comparators.extend(_expand(m.group("op") or "", _parse_partial(m.group("ver"))))
        alternatives.append(comparators)
    return alternatives


def coerce_version(text: str) -> SemVer | None:
    """Return the :class:`SemVer` for a reported ``X.Y.Z[-pre]`` string or ``None``."""

    m = _PARTIAL.match(text.strip())
    if m is None or m.group("patch") is None:
        return None
    try:
        major, minor, patch = (int(m.group(k)) for k in ("major", "minor", "patch"))
        return _version(major, minor, patch, m.group("pre"))
    except (ValueError, ConfigError):
        return None


def _allows_prerelease(version: SemVer, comparators) -> bool:
    if not version.is_prerelease:
        return True
    return any(
        bound.is_prerelease and bound.release == version.release
        for _, bound in comparators
    )


def satisfies(version: str, constraint: str) -> bool:
    """Return ``True`` when ``version`` falls inside ``constraint``.

    A reported version that cannot be parsed never satisfies.  Pre-releases
    only match alternatives that name a pre-release of the same
    ``major.minor.patch``.
    """

    alternatives = parse_range(constraint)
    parsed = coerce_version(version)
    if parsed is None:
        logger.debug("Unparsable version %r treated as unsatisfied", version)
        return False
    for comparators in alternatives:
        if all(_OPS[op](parsed, bound) for op, bound in comparators) and (
            _allows_prerelease(parsed, comparators)
        ):
            return True
    return False


def sanitize_version(version: str) -> str:
    """Remove range operators (``>``, ``=``, ``^``, ``~``) from ``version``.

    This is lossy: ``">=1.0.0 <2.0.0"`` becomes ``"1.0.0 <2.0.0"``.  Use
    :func:`is_compound_range` to detect such leftovers.
    """
    return _RANGE_CHARS.sub("", version)


def is_compound_range(version: str) -> bool:
    return bool(_COMPOUND.search(version.strip()))
