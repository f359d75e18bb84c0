# packdepot/packs/__init__.py
from .catalog import PackCatalog
from .conversion import ConversionOrchestrator
from .converter import (
    ConversionOptions,
    ConversionResult,
    InvalidResourcePackError,
    PackConverter,
)
from .ledger import HashLedger
from .library import PackLibrary
from .loaders import BedrockPackLoader, JavaPackLoader, PackLoader
from .manifest import PackManifest, readArchiveManifest
from .scanner import PackScanner
from .types import LoadReport, LoadStatus, PackLoadOutcome, PackRecord

__all__ = [
    "PackCatalog",
    "ConversionOrchestrator",
    "ConversionOptions",
    "ConversionResult",
    "InvalidResourcePackError",
    "PackConverter",
    "HashLedger",
    "PackLibrary",
    "BedrockPackLoader",
    "JavaPackLoader",
    "PackLoader",
    "PackManifest",
    "readArchiveManifest",
    "PackScanner",
    "LoadReport",
    "LoadStatus",
    "PackLoadOutcome",
    "PackRecord",
]
