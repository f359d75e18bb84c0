# packdepot/semver/semver.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import total_ordering

__all__ = [
    "SemVerPackVersion",
    "semVerFromArray",
]



@total_ordering
@dataclass(frozen=True)
class SemVerPackVersion:
    """Pack version as carried by manifest headers: a plain major.minor.patch triple."""
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def asArray(self) -> list[int]:
        """The [major, minor, patch] triple used by pack manifests."""
        return [self.major, self.minor, self.patch]

    def _cmpKey(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVerPackVersion):
            return NotImplemented
        return self._cmpKey() < other._cmpKey()



def semVerFromArray(parts: Sequence[int] | None) -> SemVerPackVersion:
    """
    Build a version from a manifest's integer array.

    Missing components are padded with 0, so [1] -> 1.0.0 and [] / None -> 0.0.0.
    Extra trailing components are ignored. Negative or non-integer entries raise.
    """
    if parts is None:
        parts = ()
    if isinstance(parts, (str, bytes)):
        raise TypeError("Version array must be a sequence of integers, not a string")

    numeric: list[int] = []
    for part in list(parts)[:3]:
        # bool is an int subclass; reject it explicitly
        if isinstance(part, bool) or not isinstance(part, int):
            raise TypeError(f"Version component {part!r} is not an integer")
        if part < 0:
            raise ValueError(f"Version component {part!r} is negative")
        numeric.append(part)

    while len(numeric) < 3:
        numeric.append(0)

    major, minor, patch = numeric
    return SemVerPackVersion(major=major, minor=minor, patch=patch)
