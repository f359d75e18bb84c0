# packdepot/packs/library.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from uuid import UUID

from packdepot.app.paths import PackPaths
from packdepot.app.settings import PackSettings
from packdepot.packs.catalog import PackCatalog
from packdepot.packs.conversion import ConversionOrchestrator
from packdepot.packs.converter import PackConverter, resolveConverter
from packdepot.packs.ledger import HashLedger
from packdepot.packs.loaders import BedrockPackLoader, JavaPackLoader
from packdepot.packs.scanner import PackScanner
from packdepot.packs.types import LoadReport, PackRecord

logger = logging.getLogger(__name__)

__all__ = ["PackLibrary"]



@dataclass
class PackLibrary:
    """
    One pack library per running instance: owns the catalog and the hash
    ledger and wires them into the scanner and the conversion orchestrator.

    Typical lifecycle:
        library = PackLibrary(settings)
        library.loadPacks()      # once, at startup
        ...                      # catalog is read-only from here on
        library.saveCache()      # at shutdown
    """

    settings: PackSettings = field(default_factory=PackSettings)
    converter: PackConverter | None = None
    catalog: PackCatalog = field(default_factory=PackCatalog)

    def __post_init__(self) -> None:
        self.paths = PackPaths.underRoot(self.settings.root)
        self.ledger = HashLedger(self.paths.cacheFile)
        if self.converter is None and self.settings.converterEntrypoint:
            self.converter = resolveConverter(self.settings.converterEntrypoint)

        self.orchestrator = ConversionOrchestrator(
            ledger=self.ledger,
            paths=self.paths,
            converter=self.converter,
            settings=self.settings,
        )
        bedrockLoader = BedrockPackLoader(self.catalog)
        self.scanner = PackScanner(self.paths)
        self.scanner.registerLoader(bedrockLoader)
        self.scanner.registerLoader(
            JavaPackLoader(
                self.orchestrator,
                bedrockLoader,
                flushLedger=self.saveCache if self.settings.saveCacheAfterConversion else None,
            )
        )
        self._cacheLoaded = False

    # ----- Load / save -----

    def loadCache(self) -> int:
        """Read the ledger from disk. Only the first call reads; later calls keep in-memory state."""
        if self._cacheLoaded:
            return len(self.ledger)
        self._cacheLoaded = True
        return self.ledger.load()

    def loadPacks(self) -> LoadReport:
        """Scan, convert and register. Never raises for a single bad pack."""
        self.loadCache()
        report = self.scanner.scan()
        logger.info("Pack catalog holds %d packs", len(self.catalog))
        return report

    def saveCache(self) -> bool:
        return self.ledger.save()

    # ----- Queries -----

    def getPack(self, packId: str | UUID) -> PackRecord | None:
        return self.catalog.get(packId)

    def readChunk(self, packId: str | UUID, index: int) -> bytes:
        record = self.catalog.get(packId)
        if record is None:
            raise KeyError(f"Unknown pack {packId}")
        return record.readChunk(index, self.settings.chunkSize)

    def chunkCount(self, packId: str | UUID) -> int:
        record = self.catalog.get(packId)
        if record is None:
            raise KeyError(f"Unknown pack {packId}")
        return record.chunkCount(self.settings.chunkSize)
