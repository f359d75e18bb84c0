# packdepot/packs/loaders.py
from __future__ import annotations
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from packdepot.app.paths import BEDROCK_EXTENSIONS, JAVA_EXTENSIONS
from packdepot.core.hashing import fileDigests, sha1Hex
from packdepot.core.logging import logContext
from packdepot.packs.catalog import PackCatalog
from packdepot.packs.conversion import ConversionOrchestrator
from packdepot.packs.manifest import readArchiveManifest
from packdepot.packs.types import LoadStatus, PackLoadOutcome, PackRecord
from packdepot.semver.semver import semVerFromArray

logger = logging.getLogger(__name__)

__all__ = [
    "PackLoader",
    "BedrockPackLoader",
    "JavaPackLoader",
]



class PackLoader(Protocol):
    kind: str
    extensions: tuple[str, ...]

    def load(self, path: Path) -> PackLoadOutcome:
        ...



class BedrockPackLoader:
    """
    Reads a bedrock pack's manifest and registers it in the catalog.

    Raises PackArchiveError for files that are not readable archives.
    """
    kind = "bedrock"
    extensions = BEDROCK_EXTENSIONS

    def __init__(self, catalog: PackCatalog) -> None:
        self.catalog = catalog

    def load(self, path: Path) -> PackLoadOutcome:
        manifest = readArchiveManifest(path)
        if manifest is None or manifest.header is None:
            logger.info("Skipping '%s': no manifest with a pack uuid", path.name)
            return PackLoadOutcome(path=path, kind=self.kind, status=LoadStatus.EXCLUDED, reason="no valid manifest")

        digests = fileDigests(path)
        record = PackRecord(
            contentHashPrimary=digests.sha256,
            contentHashLegacy=digests.sha1,
            sourceFile=path,
            manifest=manifest,
            version=semVerFromArray(manifest.header.version),
            fileSize=path.stat().st_size,
        )
        self.catalog.register(record)
        return PackLoadOutcome(path=path, kind=self.kind, status=LoadStatus.REGISTERED, record=record)



class JavaPackLoader:
    """
    Converts a java pack (once per content hash) and registers the result.

    Raises InvalidResourcePackError / OSError from the conversion, and
    PackArchiveError when the converted file turns out unreadable.
    """
    kind = "java"
    extensions = JAVA_EXTENSIONS

    def __init__(
        self,
        orchestrator: ConversionOrchestrator,
        bedrockLoader: BedrockPackLoader,
        *,
        flushLedger: Callable[[], bool] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.bedrockLoader = bedrockLoader
        self.flushLedger = flushLedger

    def load(self, path: Path) -> PackLoadOutcome:
        hash = sha1Hex(path)
        with logContext(packHash=hash):
            with path.open("rb") as stream:
                converted = self.orchestrator.convert(stream, hash)

            if converted is None:
                reason = "already converted" if self.orchestrator.isConverted(hash) else "conversion disabled"
                logger.debug("Not converting '%s': %s", path.name, reason)
                return PackLoadOutcome(path=path, kind=self.kind, status=LoadStatus.SKIPPED, reason=reason)

            if self.flushLedger is not None:
                self.flushLedger()

            # A conversion lost to an unsaved ledger rewrites a file the bedrock pass already registered.
            self.bedrockLoader.catalog.removeBySource(converted)
            outcome = self.bedrockLoader.load(converted)
        return PackLoadOutcome(
            path=path,
            kind=self.kind,
            status=outcome.status,
            record=outcome.record,
            convertedHash=hash,
            reason=outcome.reason,
        )
