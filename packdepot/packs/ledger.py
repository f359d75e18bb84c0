# packdepot/packs/ledger.py
from __future__ import annotations
import json
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = [
    "LEDGER_FIELD",
    "HashLedger",
    "normalizeHash",
]

# Single array field of the persisted document.
LEDGER_FIELD = "converted_pack_hashes"



def normalizeHash(hash: str) -> str:
    if not isinstance(hash, str):
        raise TypeError(f"Hash must be a string, got {type(hash).__name__}")
    norm = hash.strip().upper()
    if not norm:
        raise ValueError("Hash cannot be empty")
    return norm



class HashLedger:
    """
    Set of legacy digests of source packs that have already been converted.

    Values are uppercased on the way in, so membership is case-insensitive.
    The on-disk document lags the in-memory set until save() is called:

        { "converted_pack_hashes": ["<HASH>", ...] }

    Hashes are written sorted so repeated saves of the same set are byte-identical.
    """

    def __init__(self, cacheFile: str | Path, hashes: Iterable[str] = ()) -> None:
        self.cacheFile = Path(cacheFile)
        self._hashes: set[str] = {normalizeHash(hash) for hash in hashes}

    # ----- Set operations -----

    def add(self, hash: str) -> bool:
        """Adds `hash`. Returns False when it was already present."""
        norm = normalizeHash(hash)
        if norm in self._hashes:
            return False
        self._hashes.add(norm)
        return True

    def discard(self, hash: str) -> None:
        self._hashes.discard(normalizeHash(hash))

    def snapshot(self) -> list[str]:
        return sorted(self._hashes)

    def __contains__(self, hash: object) -> bool:
        if not isinstance(hash, str):
            return False
        return hash.strip().upper() in self._hashes

    def __len__(self) -> int:
        return len(self._hashes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    # ----- Persistence -----

    def load(self) -> int:
        """
        Replace the in-memory set with the persisted one. Returns the number of hashes loaded.

        A missing file leaves the ledger empty. An unreadable or malformed file
        is logged and also leaves it empty, which means every source pack is
        converted again.
        """
        self._hashes.clear()
        if not self.cacheFile.exists():
            logger.debug("No conversion cache at '%s'", self.cacheFile)
            return 0

        try:
            raw = json.loads(self.cacheFile.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as err:
            logger.warning("Could not read conversion cache '%s': %s", self.cacheFile, err)
            return 0

        entries = raw.get(LEDGER_FIELD) if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            logger.warning("Conversion cache '%s' has no '%s' array; starting empty", self.cacheFile, LEDGER_FIELD)
            return 0

        ignored = 0
        for entry in entries:
            if isinstance(entry, str) and entry.strip():
                self._hashes.add(entry.strip().upper())
            else:
                ignored += 1
        if ignored:
            logger.debug("Ignored %d non-string entries in '%s'", ignored, self.cacheFile)

        logger.info("Loaded %d converted pack hashes from '%s'", len(self._hashes), self.cacheFile)
        return len(self._hashes)

    def save(self) -> bool:
        """
        Overwrite the persisted document with the current set. Failures are logged
        and reported as False, never raised.
        """
        payload = {LEDGER_FIELD: self.snapshot()}
        tmpPath = self.cacheFile.with_name(self.cacheFile.name + ".tmp")
        try:
            self.cacheFile.parent.mkdir(parents=True, exist_ok=True)
            tmpPath.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
            os.replace(tmpPath, self.cacheFile)
        except OSError as err:
            logger.error("Saving conversion cache '%s' failed: %s", self.cacheFile, err)
            try:
                tmpPath.unlink(missing_ok=True)
            except OSError:
                pass
            return False

        logger.debug("Saved %d converted pack hashes to '%s'", len(self._hashes), self.cacheFile)
        return True
