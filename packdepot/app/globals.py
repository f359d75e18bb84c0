# packdepot/app/globals.py
from __future__ import annotations
from typing import cast, TYPE_CHECKING

from packdepot.app.context import PROCESS_REGISTRY

if TYPE_CHECKING:
    from packdepot.packs.catalog import PackCatalog
    from packdepot.packs.ledger import HashLedger
    from packdepot.packs.library import PackLibrary

__all__ = ["PACK_LIBRARY_SERVICE", "getPackLibrary", "getPackCatalog", "getHashLedger"]

PACK_LIBRARY_SERVICE = "packs.library"



def getPackLibrary() -> PackLibrary:
    library = PROCESS_REGISTRY.require(
        PACK_LIBRARY_SERVICE,
        "PackLibrary is None.\n"
        "⚠️ PACK LIBRARY MISSING ⚠️\n"
        "The shelves are bare. Nobody has called lifecycle.startup() yet,\n"
        "or shutdown() already packed everything away.",
    )
    return cast("PackLibrary", library)



def getPackCatalog() -> PackCatalog:
    return getPackLibrary().catalog



def getHashLedger() -> HashLedger:
    return getPackLibrary().ledger
