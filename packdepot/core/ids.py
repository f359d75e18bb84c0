# packdepot/core/ids.py
from __future__ import annotations

import uuid
import uuid6

__all__ = ["uuidv7", "uuidv4", "uuidFromHash", "PACK_UUID_NAMESPACE"]

# Namespace for identifiers derived from pack content hashes.
PACK_UUID_NAMESPACE = uuid.UUID("6f1b8a52-3c4e-5d7a-9b0e-2a4c6e8f0b1d")



def uuidv7(*, prefix: str = "") -> str:
    """Returns a UUIDv7 string (time-ordered), optionally prefixed."""
    return prefix + str(uuid6.uuid7())



def uuidv4() -> uuid.UUID:
    """Returns a pure random UUIDv4."""
    return uuid.uuid4()



def uuidFromHash(hash: str) -> uuid.UUID:
    """Returns a UUIDv5 derived from a content hash. Same hash, same identifier."""
    if not isinstance(hash, str) or not hash.strip():
        raise ValueError("hash must be a non-empty string")
    return uuid.uuid5(PACK_UUID_NAMESPACE, hash.strip().upper())
