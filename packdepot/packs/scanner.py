# packdepot/packs/scanner.py
from __future__ import annotations
import logging
from pathlib import Path
from threading import RLock

from packdepot.app.paths import PackPaths
from packdepot.core.errors import PackArchiveError
from packdepot.core.logging import logContext
from packdepot.packs.converter import InvalidResourcePackError
from packdepot.packs.loaders import PackLoader
from packdepot.packs.types import LoadReport, LoadStatus, PackLoadOutcome

logger = logging.getLogger(__name__)

__all__ = ["PackScanner"]



class PackScanner:
    """
    Walks the fixed pack directories and hands every candidate file to the
    loader registered for that directory.

    Order: bedrock directory first, then java. Within a directory files are
    visited by name (case-insensitive) for determinism.

    A failure on one file is logged and recorded in the LoadReport; it never
    stops the scan.
    """

    def __init__(self, paths: PackPaths) -> None:
        self.paths = paths
        self._loaders: dict[str, PackLoader] = {}
        self._directories: dict[str, Path] = {
            "bedrock": paths.bedrockDir,
            "java": paths.javaDir,
        }
        self._lock = RLock()

    # ----- Loader registry -----

    def registerLoader(self, loader: PackLoader) -> None:
        if loader.kind not in self._directories:
            raise KeyError(f"No pack directory for loader kind '{loader.kind}'")
        self._loaders[loader.kind] = loader

    # ----- Scanning -----

    def ensureDirectories(self) -> None:
        for directory in (self.paths.packsDir, *self._directories.values()):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                logger.error("Could not create pack directory '%s': %s", directory, err)

    def candidates(self, kind: str) -> list[Path]:
        loader = self._loaders[kind]
        directory = self._directories[kind]
        extensions = tuple(ext.lower() for ext in loader.extensions)
        try:
            entries = list(directory.iterdir())
        except OSError as err:
            logger.error("Could not list pack directory '%s': %s", directory, err)
            return []
        files = [entry for entry in entries if entry.name.lower().endswith(extensions) and entry.is_file()]
        files.sort(key=lambda entry: (entry.name.lower(), entry.name))
        return files

    def scan(self) -> LoadReport:
        report = LoadReport()
        with self._lock:
            self.ensureDirectories()
            for kind in self._directories:
                if kind not in self._loaders:
                    continue
                for path in self.candidates(kind):
                    report.add(self._loadOne(self._loaders[kind], path))

        logger.info(
            "Pack scan done: %s",
            ", ".join(f"{count} {status}" for status, count in report.summary().items()),
        )
        return report

    def _loadOne(self, loader: PackLoader, path: Path) -> PackLoadOutcome:
        def failed(reason: str) -> PackLoadOutcome:
            return PackLoadOutcome(path=path, kind=loader.kind, status=LoadStatus.FAILED, reason=reason)

        with logContext(packFile=path.name):
            try:
                return loader.load(path)
            except PackArchiveError as err:
                logger.error("Resource pack '%s' is broken: %s", path.name, err)
                return failed(str(err))
            except InvalidResourcePackError as err:
                logger.warning("Resource pack conversion failed for '%s': %s", path.name, err.reason)
                return failed(err.reason)
            except OSError as err:
                logger.error("I/O error while loading resource pack '%s': %s", path.name, err, exc_info=True)
                return failed(f"I/O error: {err}")
            except Exception as err:
                logger.exception("Unexpected error while loading resource pack '%s'", path.name)
                return failed(f"{type(err).__name__}: {err}")
