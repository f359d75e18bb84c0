# packdepot/app/lifecycle.py
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import JsonValue

from packdepot.app.context import PROCESS_REGISTRY
from packdepot.app.globals import PACK_LIBRARY_SERVICE
from packdepot.app.settings import PackSettings, loadSettings, settings, settingsBool
from packdepot.core.logging import configureLogging
from packdepot.packs.converter import PackConverter
from packdepot.packs.library import PackLibrary

logger = logging.getLogger(__name__)

__all__ = ["startup", "shutdown", "packLifespan"]



def startup(
    settingsTree: JsonValue | None = None,
    *,
    converter: PackConverter | None = None,
    configureLogs: bool = False,
) -> PackLibrary:
    """
    Build the process pack library, run the load pass and register it.

    `settingsTree` defaults to the merged settings (defaults + user file).
    """
    tree = loadSettings() if settingsTree is None else settingsTree
    if configureLogs:
        configureLogging(
            devMode=settingsBool("logging.devMode", True, tree=tree),
            logFile=settings("logging.file", tree=tree),
        )

    library = PackLibrary(settings=PackSettings.fromSettings(tree), converter=converter)
    report = library.loadPacks()
    for failure in report.failures:
        logger.debug("Pack '%s' not loaded: %s", failure.path.name, failure.reason)

    PROCESS_REGISTRY.register(PACK_LIBRARY_SERVICE, library, overwrite=True)
    logger.info("Pack library ready at '%s' (%d packs)", library.paths.packsDir, len(library.catalog))
    return library



def shutdown() -> None:
    """Persist the conversion cache and drop the process pack library."""
    library = PROCESS_REGISTRY.unregister(PACK_LIBRARY_SERVICE)
    if library is None:
        return
    if not library.saveCache():
        logger.warning("Conversion cache not saved; converted packs will be converted again on next start")



@contextmanager
def packLifespan(
    settingsTree: JsonValue | None = None,
    *,
    converter: PackConverter | None = None,
) -> Iterator[PackLibrary]:
    # --------------- Startup ---------------
    library = startup(settingsTree, converter=converter)
    try:
        yield library
    # --------------- Shutdown ---------------
    finally:
        shutdown()
