# packdepot/app/paths.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "PACKS_DIRNAME",
    "BEDROCK_EXTENSIONS",
    "JAVA_EXTENSIONS",
    "CONVERTED_EXTENSION",
    "MAPPINGS_SUFFIX",
    "PackPaths",
]



PACKS_DIRNAME = "packs"
BEDROCK_EXTENSIONS: tuple[str, ...] = (".zip", ".mcpack")
JAVA_EXTENSIONS: tuple[str, ...] = (".zip",)
CONVERTED_EXTENSION = ".mcpack"
MAPPINGS_SUFFIX = "_custom_model_data_mappings.json"



@dataclass(frozen=True, slots=True)
class PackPaths:
    """
    On-disk layout of a pack library, relative to a configured root.

    <root>/packs/                               packs root
    <root>/packs/bedrock/                       ready-to-serve bundles (*.zip, *.mcpack)
    <root>/packs/java/                          bundles that need conversion (*.zip)
    <root>/packs/mappings/                      per-hash mapping documents
    <root>/packs/cache.json                     converted hash ledger
    <root>/packs/resource_pack_conversion.log   verbose conversion log
    """
    packsDir: Path

    @classmethod
    def underRoot(cls, root: str | Path) -> PackPaths:
        return cls(packsDir=Path(root).expanduser() / PACKS_DIRNAME)

    @property
    def bedrockDir(self) -> Path:
        return self.packsDir / "bedrock"

    @property
    def javaDir(self) -> Path:
        return self.packsDir / "java"

    @property
    def mappingsDir(self) -> Path:
        return self.packsDir / "mappings"

    @property
    def cacheFile(self) -> Path:
        return self.packsDir / "cache.json"

    @property
    def conversionLogFile(self) -> Path:
        return self.packsDir / "resource_pack_conversion.log"

    def convertedPackFile(self, hash: str) -> Path:
        return self.bedrockDir / f"{hash.upper()}{CONVERTED_EXTENSION}"

    def mappingsFile(self, hash: str) -> Path:
        return self.mappingsDir / f"{hash.lower()}{MAPPINGS_SUFFIX}"
