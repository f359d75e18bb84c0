# packdepot/packs/manifest.py
from __future__ import annotations
import logging
import re
import zipfile
from pathlib import Path
from typing import Annotated, Any
from uuid import UUID

import json5
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

from packdepot.core.errors import PackArchiveError, PackManifestError

logger = logging.getLogger(__name__)

__all__ = [
    "MANIFEST_ENTRY_RE",
    "ManifestHeader",
    "ManifestModule",
    "PackManifest",
    "isManifestEntry",
    "parseManifest",
    "readArchiveManifest",
]



# "manifest.json" and the older "pack_manifest.json", at any depth inside the archive.
MANIFEST_ENTRY_RE = re.compile(r"(?:^|/)(?:pack_)?manifest\.json$", re.IGNORECASE)

# Manifests are small; anything bigger is not a manifest worth parsing.
MAX_MANIFEST_BYTES = 1024 * 1024



def _nonNegative(value: list[int]) -> list[int]:
    for part in value:
        if part < 0:
            raise ValueError(f"Version component {part!r} is negative")
    return value


VersionArray = Annotated[list[int], AfterValidator(_nonNegative)]



class ManifestHeader(BaseModel):
    """Header section of a pack manifest. Unknown keys are kept."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    uuid: UUID | None = None
    version: VersionArray | None = None
    name: str | None = None
    description: str | None = None
    minEngineVersion: VersionArray | None = Field(default=None, alias="min_engine_version")



class ManifestModule(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    uuid: UUID | None = None
    version: VersionArray | None = None
    description: str | None = None



class PackManifest(BaseModel):
    """Represents a parsed pack manifest (identifier, version triple, metadata)."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    formatVersion: int | str | None = Field(default=None, alias="format_version")
    header: ManifestHeader | None = None
    modules: list[ManifestModule] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def packUuid(self) -> UUID | None:
        return self.header.uuid if self.header is not None else None

    @property
    def name(self) -> str | None:
        return self.header.name if self.header is not None else None



def isManifestEntry(entryName: str) -> bool:
    return bool(MANIFEST_ENTRY_RE.search(entryName))



def parseManifest(raw: bytes | str, *, entryName: str = "manifest.json") -> PackManifest:
    """
    Parse manifest bytes/text into a PackManifest.

    JSON5 is accepted since hand-edited manifests often carry comments or
    trailing commas. Raises PackManifestError when the document is unusable.
    """
    try:
        text = raw.decode("utf-8-sig") if isinstance(raw, bytes) else raw
    except UnicodeDecodeError as err:
        raise PackManifestError(entryName, f"not UTF-8 ({err})") from err

    try:
        data = json5.loads(text)
    except ValueError as err:
        raise PackManifestError(entryName, f"not valid JSON ({err})") from err

    if not isinstance(data, dict):
        raise PackManifestError(entryName, "top level must be an object")

    try:
        return PackManifest.model_validate(data)
    except ValidationError as err:
        raise PackManifestError(entryName, f"schema mismatch ({err.error_count()} errors)") from err



def _readEntry(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    if info.file_size > MAX_MANIFEST_BYTES:
        raise PackManifestError(info.filename, f"too large ({info.file_size} bytes)")
    with archive.open(info) as stream:
        return stream.read(MAX_MANIFEST_BYTES + 1)



def readArchiveManifest(path: str | Path) -> PackManifest | None:
    """
    Open `path` as a zip archive and return the first manifest entry that
    parses and carries a header uuid.

    Entries are visited in archive order. An entry that fails to parse, or
    parses without a uuid (e.g. a stale pack_manifest.json), is skipped and the
    scan continues. Returns None when no entry qualifies.

    Raises PackArchiveError when the file cannot be opened as an archive.
    """
    path = Path(path)
    try:
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or not isManifestEntry(info.filename):
                    continue
                try:
                    manifest = parseManifest(_readEntry(archive, info), entryName=info.filename)
                except PackManifestError as err:
                    logger.debug("Ignoring manifest entry in '%s': %s", path.name, err)
                    continue
                except (zipfile.BadZipFile, EOFError, NotImplementedError, RuntimeError) as err:
                    # Corrupt, encrypted or unsupported member; other entries may still be readable.
                    logger.debug("Unreadable entry '%s' in '%s': %s", info.filename, path.name, err)
                    continue

                if manifest.packUuid is None:
                    logger.debug("Manifest entry '%s' in '%s' has no uuid", info.filename, path.name)
                    continue
                return manifest
    except (zipfile.BadZipFile, OSError) as err:
        raise PackArchiveError(path, str(err) or type(err).__name__) from err
    return None
