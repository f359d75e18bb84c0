# packdepot/app/settings.py
from __future__ import annotations
import json5, os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_SETTINGS", "SETTINGS_ENV_VAR", "PackSettings",
    "userSettingsPath", "loadUserSettings", "loadSettings",
    "deepMerge", "getByPath", "settings", "settingsBool",
]


SETTINGS_ENV_VAR = "PACKDEPOT_SETTINGS"

DEFAULT_SETTINGS: JsonValue = {
    "__source": "PACKDEPOT_DEFAULTS",
    "packs": {
        "root": ".",
        "convertJavaPacks": True,
        "debugConversionLog": False,
        "chunkSize": 102400,
        "conversion": {
            "author": "packdepot",
            "version": [1, 0, 0],
            "deterministicUuid": False,
            "converter": None,
        },
        "cache": {"saveAfterConversion": False},
    },
    "logging": {"devMode": True, "file": "packdepot.log"},
}



def userSettingsPath() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~/.packdepot/packdepot.json5"))



def loadUserSettings(filePath: Path | None = None) -> JsonValue:
    filePath = filePath or userSettingsPath()
    if filePath.exists():
        try:
            data = json5.loads(filePath.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
            return {}
        if not isinstance(data, dict):
            logger.error("Ignoring '%s': top level must be an object", filePath)
            return {}
        return cast(JsonValue, data)
    return {}



@lru_cache(maxsize=1)
def loadSettings() -> JsonValue:
    return deepMerge(DEFAULT_SETTINGS, loadUserSettings())



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types (lists, strings, numbers, booleans, null),
    the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = {}
        for key, value in first.items():
            out[key] = cast(JsonValue, value)
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], cast(JsonValue, value))
            else:
                out[key] = cast(JsonValue, value)
        return cast(JsonValue, out)

    return cast(JsonValue, second)



def getByPath(obj: Any, path: str, default: Any | None = None) -> Any:
    """Walks a dotted path through nested mappings. Returns `default` when unreachable."""
    current: Any = obj
    for part in path.split("."):
        if not part:
            return default
        if isinstance(current, Mapping) and part in current:
            current = current[part]
            continue
        return default
    return current

# ---------- Ergonomic accessors over merged settings ----------

def settings(path: str, default: Any = None, *, tree: JsonValue | None = None) -> Any:
    """Returns value at `path` from `tree` (merged settings by default), or `default` if missing."""
    val = getByPath(loadSettings() if tree is None else tree, path)
    return default if val is None else val



def settingsBool(path: str, default: bool = False, *, tree: JsonValue | None = None) -> bool:
    """Returns bool value at `path` or `default` if missing."""
    val = getByPath(loadSettings() if tree is None else tree, path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)

# --------------------------------------------------------------

class PackSettings(BaseModel):
    """Typed snapshot of the `packs` settings section handed to the pack library."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    root: Path = Path(".")
    convertJavaPacks: bool = True
    debugConversionLog: bool = False
    chunkSize: int = Field(default=102400, gt=0)
    conversionAuthor: str = "packdepot"
    conversionVersion: tuple[int, int, int] = (1, 0, 0)
    deterministicUuid: bool = False
    converterEntrypoint: str | None = None
    saveCacheAfterConversion: bool = False

    @field_validator("conversionVersion", mode="before")
    @classmethod
    def _padVersion(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            parts = list(value)[:3]
            while len(parts) < 3:
                parts.append(0)
            return tuple(parts)
        return value

    @classmethod
    def fromSettings(cls, merged: JsonValue | None = None) -> PackSettings:
        """Builds PackSettings from a merged settings tree (defaults to loadSettings())."""
        tree = loadSettings() if merged is None else merged
        packs = getByPath(tree, "packs", {})
        if not isinstance(packs, Mapping):
            packs = {}

        def pick(path: str, fallback: Any) -> Any:
            val = getByPath(packs, path)
            return fallback if val is None else val

        return cls(
            root=Path(str(pick("root", "."))),
            convertJavaPacks=pick("convertJavaPacks", True),
            debugConversionLog=pick("debugConversionLog", False),
            chunkSize=pick("chunkSize", 102400),
            conversionAuthor=pick("conversion.author", "packdepot"),
            conversionVersion=pick("conversion.version", [1, 0, 0]),
            deterministicUuid=pick("conversion.deterministicUuid", False),
            converterEntrypoint=pick("conversion.converter", None),
            saveCacheAfterConversion=pick("cache.saveAfterConversion", False),
        )
