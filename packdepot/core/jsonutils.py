# packdepot/core/jsonutils.py
from __future__ import annotations

import json
import traceback
from collections.abc import Mapping, Iterable
from dataclasses import is_dataclass, asdict
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import UUID

from pydantic import BaseModel

__all__ = ["safeJsonDumps", "serializeError", "tryJSONify"]

# Upper bound for serialized tracebacks
TRACEBACK_CHAR_LIMIT = 4000



# ------------------------------------------------
#                JSON serialization
# ------------------------------------------------

def safeJsonDumps(obj: object) -> str:
    """
    Serializes an object to a compact JSON string.
    Uses deterministic separators (",", ":") and disallows NaN/infinity.
    If direct JSON encoding fails, falls back to tryJSONify and retries.
    """
    try:
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError):
        safePayload = tryJSONify(obj, _maxDepth=None)
        return json.dumps(safePayload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))



# ------------------------------------------------
#              Error / Exception helpers
# ------------------------------------------------

def serializeError(err: Any) -> dict[str, Any]:
    """
    Converts Exception or arbitrary object into a JSON-serializable dict.

    Examples:
        ValueError("bad") -> {"type": "ValueError", "message": "bad", "stack": "..."}
        "error text"      -> {"message": "error text"}
        None              -> {}
    """
    if err is None:
        return {}

    if isinstance(err, str):
        return {"message": err}

    if isinstance(err, BaseException):
        data: dict[str, Any] = {
            "type": err.__class__.__name__,
            "message": str(err),
        }
        reason = getattr(err, "reason", None)
        if isinstance(reason, str):
            data["reason"] = reason

        traceBack = getattr(err, "__traceback__", None)
        if traceBack:
            text = "".join(traceback.format_tb(traceBack))
            if len(text) > TRACEBACK_CHAR_LIMIT:
                text = "[TRUNCATED]" + text[-TRACEBACK_CHAR_LIMIT:]
            data["stack"] = text

        return data

    return {"type": type(err).__name__, "repr": repr(err)}



# ------------------------------------------------
#              Generic JSON safety
# ------------------------------------------------

def tryJSONify(obj: Any, *, _seen: set[int] | None = None, _depth: int = 0, _maxDepth: int | None = 10) -> Any:
    """
    Attempts to make any object JSON-serializable.

    Rules:
      • Basic scalars (None, bool, int, float, str) are preserved.
      • Exceptions → serializeError().
      • bytes → hex string (digests are the common case here).
      • date/datetime → ISO8601 string.
      • Path, UUID → string.
      • pydantic models → model_dump(mode="json").
      • sets/tuples/iterables → list.
      • Mappings → dict with str keys.
      • fallback → repr(obj)
    """
    if _seen is None:
        _seen = set()

    oid = id(obj)
    if oid in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    if isinstance(_maxDepth, int) and _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"

    # Primitives
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    _seen.add(oid)
    nextKw = {"_seen": _seen, "_depth": _depth + 1, "_maxDepth": _maxDepth}

    if isinstance(obj, BaseException):
        return serializeError(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).hex()

    if isinstance(obj, (date, datetime)):
        return obj.isoformat()

    if isinstance(obj, Enum):
        return tryJSONify(obj.value, **nextKw)

    if isinstance(obj, (Path, UUID)):
        return str(obj)

    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")

    if is_dataclass(obj) and not isinstance(obj, type):
        return tryJSONify(asdict(obj), **nextKw)

    if isinstance(obj, Mapping):
        return {str(key): tryJSONify(value, **nextKw) for key, value in obj.items()}

    # sets/frozensets/tuples and any other iterable
    if isinstance(obj, Iterable):
        return [tryJSONify(value, **nextKw) for value in obj]

    # Last-ditch representation (avoid raising during logging)
    return repr(obj)
