# packdepot/packs/conversion.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import BinaryIO
from uuid import UUID

from packdepot.app.paths import PackPaths
from packdepot.app.settings import PackSettings
from packdepot.core.ids import uuidFromHash, uuidv4, uuidv7
from packdepot.core.logging import logContext
from packdepot.packs.converter import ConversionOptions, PackConverter, mappingsToJson
from packdepot.packs.ledger import HashLedger, normalizeHash

logger = logging.getLogger(__name__)

__all__ = [
    "BANNER",
    "ConversionOrchestrator",
    "sessionHeader",
]

BANNER = "*" * 74



def sessionHeader(hash: str) -> str:
    return (
        f"{BANNER}\n"
        f"Starting conversion of resource pack with hash {hash}\n"
        f"{BANNER}\n\n"
    )



class ConversionOrchestrator:
    """
    Converts a java pack into a bedrock pack once per distinct content hash.

    Side artifacts of a successful conversion:
      - packs/bedrock/<HASH>.mcpack                        converted pack
      - packs/mappings/<hash>_custom_model_data_mappings.json
      - packs/resource_pack_conversion.log                 (verbose logging only)
      - the hash, in the ledger (in memory; persisted by whoever calls ledger.save())

    A conversion that fails (converter error, mappings write error) leaves the
    hash out of the ledger, so it is retried on the next run.
    """

    def __init__(
        self,
        *,
        ledger: HashLedger,
        paths: PackPaths,
        converter: PackConverter | None,
        settings: PackSettings,
    ) -> None:
        self.ledger = ledger
        self.paths = paths
        self.converter = converter
        self.settings = settings
        self._warnedNoConverter = False

    @property
    def enabled(self) -> bool:
        return self.settings.convertJavaPacks and self.converter is not None

    def isConverted(self, hash: str) -> bool:
        return hash in self.ledger

    def _packUuid(self, hash: str) -> UUID:
        if self.settings.deterministicUuid:
            return uuidFromHash(hash)
        return uuidv4()

    def convert(self, source: BinaryIO, hash: str) -> Path | None:
        """
        Convert `source` (legacy digest `hash`) into packs/bedrock/<HASH>.mcpack.

        Returns the converted file, or None when nothing was converted because
        the hash is already in the ledger or conversion is disabled.

        Raises InvalidResourcePackError when the converter rejects the pack and
        OSError on I/O failure. Neither leaves the hash in the ledger.
        """
        hash = normalizeHash(hash)
        if hash in self.ledger:
            logger.debug("Pack %s already converted", hash)
            return None
        if not self.settings.convertJavaPacks:
            return None
        if self.converter is None:
            if not self._warnedNoConverter:
                logger.warning("No pack converter configured; java packs will not be converted")
                self._warnedNoConverter = True
            return None

        self.paths.bedrockDir.mkdir(parents=True, exist_ok=True)
        destination = self.paths.convertedPackFile(hash)
        existedBefore = destination.exists()

        # Session text for the on-disk conversion log; None when verbose logging is off.
        logLines: list[str] | None = [sessionHeader(hash)] if self.settings.debugConversionLog else None

        def sink(message: str) -> None:
            if logLines is not None:
                logLines.append(f"{message}\n")

        options = ConversionOptions(
            hash=hash,
            packUuid=self._packUuid(hash),
            version=self.settings.conversionVersion,
            name=hash,
            author=self.settings.conversionAuthor,
            logSink=sink,
        )

        with logContext(packHash=hash, conversionId=uuidv7(prefix="conv_")):
            logger.info("Converting java pack %s", hash)
            try:
                result = self.converter.convert(source, destination, options)
                mappingsJson = mappingsToJson(result.generatedMappings)
            except BaseException:
                if not existedBefore:
                    destination.unlink(missing_ok=True)
                raise

            self.ledger.add(hash)
            try:
                self._writeMappings(hash, mappingsJson)
            except OSError:
                self.ledger.discard(hash)
                raise

            if logLines is not None:
                logLines.append("\n\n")
                self._appendConversionLog("".join(logLines))

            logger.info("Converted java pack %s to '%s'", hash, destination.name)
        return destination

    def _writeMappings(self, hash: str, mappingsJson: str) -> Path:
        target = self.paths.mappingsFile(hash)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(mappingsJson, encoding="utf-8")
        return target

    def _appendConversionLog(self, text: str) -> None:
        logFile = self.paths.conversionLogFile
        try:
            logFile.parent.mkdir(parents=True, exist_ok=True)
            with logFile.open("a", encoding="utf-8") as file:
                file.write(text)
        except OSError as err:
            logger.error("Could not write conversion log '%s': %s", logFile, err)
