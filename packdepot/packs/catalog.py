# packdepot/packs/catalog.py
from __future__ import annotations
import logging
from collections.abc import Iterator
from pathlib import Path
from uuid import UUID

from packdepot.packs.types import PackRecord

logger = logging.getLogger(__name__)

__all__ = [
    "PackCatalog",
    "canonicalPackId",
]



def canonicalPackId(packId: str | UUID) -> str:
    """
    Canonical catalog key: lowercase hyphenated uuid form.
    Strings that are not uuids are returned stripped, unchanged otherwise.
    """
    if isinstance(packId, UUID):
        return str(packId)
    text = str(packId).strip()
    try:
        return str(UUID(text))
    except ValueError:
        return text



class PackCatalog:
    """
    In-memory registry of loaded packs keyed by manifest uuid.

    Responsibilities:
      - Hold exactly one PackRecord per pack id (last registration wins).
      - Provide lookup by pack id and by legacy (SHA-1) digest.

    Mutated only during the load pass; read-only afterwards.
    """

    def __init__(self) -> None:
        self._byId: dict[str, PackRecord] = {}
        # legacy digest -> pack id
        self._byLegacyHash: dict[str, str] = {}

    # ----- Registration -----

    def register(self, record: PackRecord) -> PackRecord | None:
        """
        Insert `record` under its pack id. Returns the record it replaced, if any.
        """
        if record.manifest.packUuid is None:
            raise ValueError(f"Refusing to register '{record.sourceFile.name}' without a pack uuid")

        packId = record.packId
        previous = self._byId.get(packId)
        if previous is not None:
            self._byLegacyHash.pop(previous.contentHashLegacy.upper(), None)
            if previous.sourceFile != record.sourceFile:
                logger.warning(
                    "Pack id %s from '%s' replaces the one from '%s'",
                    packId,
                    record.sourceFile.name,
                    previous.sourceFile.name,
                )

        self._byId[packId] = record
        self._byLegacyHash[record.contentHashLegacy.upper()] = packId
        logger.debug("Registered pack %s (%s) v%s", packId, record.sourceFile.name, record.version)
        return previous

    def remove(self, packId: str | UUID) -> PackRecord | None:
        record = self._byId.pop(canonicalPackId(packId), None)
        if record is not None:
            self._byLegacyHash.pop(record.contentHashLegacy.upper(), None)
        return record

    def removeBySource(self, sourceFile: Path) -> list[PackRecord]:
        """
        Drop every record read from `sourceFile`. Used when a file is rewritten
        in place, since records built from the old bytes carry stale digests.
        """
        stale = [packId for packId, record in self._byId.items() if record.sourceFile == sourceFile]
        removed = [record for record in (self.remove(packId) for packId in stale) if record is not None]
        for record in removed:
            logger.debug("Dropped pack %s: '%s' was rewritten", record.packId, sourceFile.name)
        return removed

    def clear(self) -> None:
        self._byId.clear()
        self._byLegacyHash.clear()

    # ----- Lookup -----

    def get(self, packId: str | UUID) -> PackRecord | None:
        return self._byId.get(canonicalPackId(packId))

    def getByLegacyHash(self, hash: str) -> PackRecord | None:
        packId = self._byLegacyHash.get(hash.strip().upper())
        return self._byId.get(packId) if packId is not None else None

    def ids(self) -> list[str]:
        return list(self._byId)

    def records(self) -> list[PackRecord]:
        return list(self._byId.values())

    def items(self) -> list[tuple[str, PackRecord]]:
        return list(self._byId.items())

    def __contains__(self, packId: object) -> bool:
        if not isinstance(packId, (str, UUID)):
            return False
        return canonicalPackId(packId) in self._byId

    def __len__(self) -> int:
        return len(self._byId)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._byId))
