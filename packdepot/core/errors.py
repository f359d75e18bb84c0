# packdepot/core/errors.py
from __future__ import annotations
from pathlib import Path

__all__ = [
    "PackDepotError",
    "PackArchiveError",
    "PackManifestError",
    "ServiceMissingError",
]



class PackDepotError(Exception):
    """Base class for every error raised by packdepot itself."""
    pass



class PackArchiveError(PackDepotError):
    """Raised when a bundle cannot be opened or read as an archive."""
    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{Path(path).name}: {message}")
        self.path = Path(path)



class PackManifestError(PackDepotError):
    """Raised when a manifest document is present but unusable."""
    def __init__(self, entryName: str, message: str) -> None:
        super().__init__(f"{entryName}: {message}")
        self.entryName = entryName



class ServiceMissingError(PackDepotError):
    """Raised when a process-wide service is requested before startup registered it."""
    pass
