# packdepot/core/hashing.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path

__all__ = ["FileDigests", "fileDigests", "sha1Hex"]

_CHUNK = 8192



@dataclass(frozen=True, slots=True)
class FileDigests:
    sha256: bytes   # 256-bit primary digest (raw bytes)
    sha1: str       # 160-bit legacy digest, uppercase hex



def fileDigests(path: str | Path) -> FileDigests:
    """Returns both digests of the file content, reading it once."""
    primary = hashlib.sha256()
    legacy = hashlib.sha1()

    with Path(path).open("rb") as file:
        for chunk in iter(lambda: file.read(_CHUNK), b""):
            primary.update(chunk)
            legacy.update(chunk)

    return FileDigests(sha256=primary.digest(), sha1=legacy.hexdigest().upper())



def sha1Hex(path: str | Path) -> str:
    """Uppercase hex SHA-1 of the file content. Used as the conversion dedup key."""
    legacy = hashlib.sha1()
    with Path(path).open("rb") as file:
        for chunk in iter(lambda: file.read(_CHUNK), b""):
            legacy.update(chunk)
    return legacy.hexdigest().upper()
