# packdepot/packs/types.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from packdepot.packs.manifest import PackManifest
from packdepot.semver.semver import SemVerPackVersion

__all__ = [
    "CHUNK_SIZE",
    "PackRecord",
    "LoadStatus",
    "PackLoadOutcome",
    "LoadReport",
]

# Size of each chunk used when packs are streamed to clients, in bytes.
CHUNK_SIZE = 102400



@dataclass(frozen=True, slots=True)
class PackRecord:
    """
    A registered bundle. Only built once its manifest parsed and carried a uuid.
    """
    contentHashPrimary: bytes     # SHA-256 of the whole file
    contentHashLegacy: str        # SHA-1 of the whole file, uppercase hex
    sourceFile: Path
    manifest: PackManifest
    version: SemVerPackVersion
    fileSize: int

    @property
    def packId(self) -> str:
        """Canonical string form of the manifest header uuid (catalog key)."""
        return str(self.manifest.packUuid)

    @property
    def hexPrimary(self) -> str:
        return self.contentHashPrimary.hex()

    def chunkCount(self, chunkSize: int = CHUNK_SIZE) -> int:
        if chunkSize <= 0:
            raise ValueError("chunkSize must be positive")
        return -(-self.fileSize // chunkSize)

    def readChunk(self, index: int, chunkSize: int = CHUNK_SIZE) -> bytes:
        """Returns the bytes of chunk `index`; the last chunk may be short."""
        count = self.chunkCount(chunkSize)
        if not 0 <= index < count:
            raise IndexError(f"Chunk {index} out of range for {self.sourceFile.name} ({count} chunks)")
        with self.sourceFile.open("rb") as file:
            file.seek(index * chunkSize)
            return file.read(chunkSize)



class LoadStatus(str, Enum):
    REGISTERED = "registered"   # in the catalog
    EXCLUDED = "excluded"       # opened fine, no usable manifest
    SKIPPED = "skipped"         # conversion was a no-op (already converted / disabled)
    FAILED = "failed"           # error while reading or converting



@dataclass(frozen=True, slots=True)
class PackLoadOutcome:
    path: Path
    kind: str
    status: LoadStatus
    record: PackRecord | None = None
    convertedHash: str | None = None
    reason: str | None = None



@dataclass(slots=True)
class LoadReport:
    """Per-file outcomes of a single load pass, in scan order."""
    outcomes: list[PackLoadOutcome] = field(default_factory=list)

    def add(self, outcome: PackLoadOutcome) -> None:
        self.outcomes.append(outcome)

    def withStatus(self, status: LoadStatus) -> list[PackLoadOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is status]

    @property
    def registeredIds(self) -> list[str]:
        return [outcome.record.packId for outcome in self.outcomes if outcome.record is not None]

    @property
    def convertedHashes(self) -> list[str]:
        return [outcome.convertedHash for outcome in self.outcomes if outcome.convertedHash]

    @property
    def failures(self) -> list[PackLoadOutcome]:
        return self.withStatus(LoadStatus.FAILED)

    def summary(self) -> dict[str, int]:
        return {status.value: len(self.withStatus(status)) for status in LoadStatus}
