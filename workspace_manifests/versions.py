"""Version parsing and range matching.

Concrete versions are parsed into semver.Version objects. Version ranges
follow the npm convention (caret, tilde, x-ranges, hyphen ranges,
comparison operators and ``||`` alternatives), so a workspace project's
version is checked against a specifier the same way the package manager
would check it.
"""

from __future__ import annotations

import re
from typing import NamedTuple

import semver

from .errors import MalformedSpecifierError

# One component of a partial version: a number or a wildcard
_XR = r"(0|[1-9]\d*|[xX*])"
_PRERELEASE = r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))"
_BUILD = r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)"
_PARTIAL = rf"[v=\s]*{_XR}(?:\.{_XR}(?:\.{_XR}{_PRERELEASE}?{_BUILD}?)?)?"

_COMPARATOR_RE = re.compile(rf"^(\^|~>?|<=|>=|<|>|=)?{_PARTIAL}$")
_HYPHEN_RE = re.compile(rf"^\s*({_PARTIAL})\s+-\s+({_PARTIAL})\s*$")
_PARTIAL_RE = re.compile(rf"^{_PARTIAL}$")
_OPERATOR_GAP_RE = re.compile(r"(<=|>=|<|>|=|\^|~>?)\s+")
_ALTERNATIVES_RE = re.compile(r"\s*\|\|\s*")


class Comparator(NamedTuple):
    """A single ``<op> <version>`` test.

    An empty operator with no version matches any version.
    """

    operator: str
    version: semver.Version | None

    def test(self, version: semver.Version) -> bool:
        if self.version is None:
            return True
        if self.operator == "<":
            return version < self.version
        if self.operator == "<=":
            return version <= self.version
        if self.operator == ">":
            return version > self.version
        if self.operator == ">=":
            return version >= self.version
        return version == self.version


ANY = Comparator("", None)
# Matches nothing: every version is >= 0.0.0-0
NOTHING = Comparator("<", semver.Version(0, 0, 0, prerelease="0"))


class _Partial(NamedTuple):
    major: int | None
    minor: int | None
    patch: int | None
    prerelease: str | None


def parse_version(version_str: str) -> semver.Version:
    """Parse a concrete version string into a semver.Version object.

    A leading "v" or "=" is tolerated and build metadata is dropped, since
    it never affects range matching.

    Raises:
        ValueError: If the string is not a full major.minor.patch version.
    """
    text = version_str.strip().lstrip("=v").strip()
    return semver.Version.parse(text).replace(build=None)


def _component(value: str | None) -> int | None:
    if value is None or value in ("x", "X", "*"):
        return None
    return int(value)


def _parse_partial(major: str, minor: str | None, patch: str | None, pre: str | None) -> _Partial:
    parts = [_component(major), _component(minor), _component(patch)]
    # Once a component is a wildcard, everything after it is too ("1.x.3" → "1.x")
    for i in range(1, 3):
        if parts[i - 1] is None:
            parts[i] = None
    return _Partial(parts[0], parts[1], parts[2], pre if parts[2] is not None else None)


def _ver(major: int, minor: int = 0, patch: int = 0, prerelease: str | None = None) -> semver.Version:
    return semver.Version(major, minor, patch, prerelease=prerelease)


def _caret(p: _Partial) -> list[Comparator]:
    if p.major is None:
        return [ANY]
    if p.minor is None:
        return [Comparator(">=", _ver(p.major)), Comparator("<", _ver(p.major + 1, prerelease="0"))]
    if p.patch is None:
        if p.major == 0:
            upper = _ver(0, p.minor + 1, prerelease="0")
        else:
            upper = _ver(p.major + 1, prerelease="0")
        return [Comparator(">=", _ver(p.major, p.minor)), Comparator("<", upper)]
    lower = _ver(p.major, p.minor, p.patch, p.prerelease)
    if p.major == 0 and p.minor == 0:
        upper = _ver(0, 0, p.patch + 1, prerelease="0")
    elif p.major == 0:
        upper = _ver(0, p.minor + 1, prerelease="0")
    else:
        upper = _ver(p.major + 1, prerelease="0")
    return [Comparator(">=", lower), Comparator("<", upper)]


def _tilde(p: _Partial) -> list[Comparator]:
    if p.major is None:
        return [ANY]
    if p.minor is None:
        return [Comparator(">=", _ver(p.major)), Comparator("<", _ver(p.major + 1, prerelease="0"))]
    lower = _ver(p.major, p.minor, p.patch or 0, p.prerelease)
    return [Comparator(">=", lower), Comparator("<", _ver(p.major, p.minor + 1, prerelease="0"))]


def _primitive(operator: str, p: _Partial) -> list[Comparator]:
    """Expand an operator (or none) applied to a possibly-partial version."""
    if operator in ("", "="):
        # Bare partial versions are x-ranges: "1.2" means "1.2.x"
        if p.major is None:
            return [ANY]
        if p.minor is None:
            return [Comparator(">=", _ver(p.major)), Comparator("<", _ver(p.major + 1, prerelease="0"))]
        if p.patch is None:
            return [
                Comparator(">=", _ver(p.major, p.minor)),
                Comparator("<", _ver(p.major, p.minor + 1, prerelease="0")),
            ]
        return [Comparator("=", _ver(p.major, p.minor, p.patch, p.prerelease))]

    if p.major is None:
        return [NOTHING] if operator in ("<", ">") else [ANY]

    if p.patch is not None:
        return [Comparator(operator, _ver(p.major, p.minor or 0, p.patch, p.prerelease))]

    if operator == ">":
        # ">1" means ">=2.0.0", ">1.2" means ">=1.3.0"
        if p.minor is None:
            return [Comparator(">=", _ver(p.major + 1))]
        return [Comparator(">=", _ver(p.major, p.minor + 1))]
    if operator == "<=":
        # "<=1" means "<2.0.0-0", "<=1.2" means "<1.3.0-0"
        if p.minor is None:
            return [Comparator("<", _ver(p.major + 1, prerelease="0"))]
        return [Comparator("<", _ver(p.major, p.minor + 1, prerelease="0"))]
    if operator == "<":
        return [Comparator("<", _ver(p.major, p.minor or 0, prerelease="0"))]
    return [Comparator(">=", _ver(p.major, p.minor or 0))]


def _hyphen(low: _Partial, high: _Partial) -> list[Comparator]:
    comparators: list[Comparator] = []
    if low.major is not None:
        comparators.append(
            Comparator(">=", _ver(low.major, low.minor or 0, low.patch or 0, low.prerelease))
        )
    if high.major is not None:
        if high.minor is None:
            comparators.append(Comparator("<", _ver(high.major + 1, prerelease="0")))
        elif high.patch is None:
            comparators.append(Comparator("<", _ver(high.major, high.minor + 1, prerelease="0")))
        else:
            comparators.append(
                Comparator("<=", _ver(high.major, high.minor, high.patch, high.prerelease))
            )
    return comparators or [ANY]


def _match_partial(text: str, specifier: str) -> _Partial:
    match = _PARTIAL_RE.match(text)
    if not match:
        raise MalformedSpecifierError(specifier, f"invalid version {text!r}")
    return _parse_partial(*match.groups())


def _parse_comparator(token: str, specifier: str) -> list[Comparator]:
    match = _COMPARATOR_RE.match(token)
    if not match:
        raise MalformedSpecifierError(specifier, f"unexpected {token!r}")
    operator, *parts = match.groups()
    partial = _parse_partial(*parts)
    if operator == "^":
        return _caret(partial)
    if operator in ("~", "~>"):
        return _tilde(partial)
    return _primitive(operator or "", partial)


def parse_range(specifier: str) -> list[list[Comparator]]:
    """Parse an npm-style range into alternatives of comparator sets.

    A version satisfies the range if it satisfies every comparator of at
    least one set.

    Examples:
        "^1.2.3" → [[>=1.2.3, <2.0.0-0]]
        "1.x || >=3" → [[>=1.0.0, <2.0.0-0], [>=3.0.0]]

    Raises:
        MalformedSpecifierError: If the specifier is not a valid range.
    """
    alternatives: list[list[Comparator]] = []
    for part in _ALTERNATIVES_RE.split(specifier.strip()):
        hyphen = _HYPHEN_RE.match(part)
        if hyphen:
            low, high = hyphen.group(1), hyphen.group(6)
            alternatives.append(
                _hyphen(_match_partial(low, specifier), _match_partial(high, specifier))
            )
            continue

        tokens = _OPERATOR_GAP_RE.sub(r"\1", part).split()
        if not tokens:
            alternatives.append([ANY])
            continue
        comparators: list[Comparator] = []
        for token in tokens:
            comparators.extend(_parse_comparator(token, specifier))
        alternatives.append(comparators)
    # A bare "*" alternative widens the whole range to "*", which admits
    # no prereleases
    if any(all(c == ANY for c in alt) for alt in alternatives):
        return [[ANY]]
    return alternatives


def _test_set(comparators: list[Comparator], version: semver.Version) -> bool:
    if not all(c.test(version) for c in comparators):
        return False
    if not version.prerelease:
        return True
    # A prerelease only matches when the range opts in to prereleases of
    # the same major.minor.patch
    for c in comparators:
        if c.version is not None and c.version.prerelease:
            if c.version.finalize_version() == version.finalize_version():
                return True
    return False


def satisfies(version_str: str, specifier: str) -> bool:
    """Check whether a concrete version falls within a range.

    Raises:
        ValueError: If the version cannot be parsed.
        MalformedSpecifierError: If the specifier cannot be parsed.
    """
    version = parse_version(version_str)
    return any(_test_set(s, version) for s in parse_range(specifier))


def is_satisfied(version_str: str, specifier: str) -> bool:
    """Like satisfies(), but a malformed version or range yields False.

    This is the non-warning convenience form. The classifier calls
    satisfies() directly so it can turn a malformed specifier into a
    SynthesisWarning instead of a silent False.
    """
    try:
        return satisfies(version_str, specifier)
    except ValueError:
        return False
