# packdepot/packs/converter.py
from __future__ import annotations
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from typing import Any, BinaryIO, Protocol
from uuid import UUID

from packdepot.core.errors import PackDepotError

__all__ = [
    "InvalidResourcePackError",
    "ConversionOptions",
    "ConversionResult",
    "PackConverter",
    "mappingsToJson",
    "resolveConverter",
]



class InvalidResourcePackError(PackDepotError):
    """Raised by a converter that rejects the source pack. `reason` is human readable."""
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason



@dataclass(frozen=True, slots=True)
class ConversionOptions:
    hash: str
    packUuid: UUID
    version: tuple[int, int, int]
    name: str
    author: str
    logSink: Callable[[str], None]



@dataclass(frozen=True, slots=True)
class ConversionResult:
    # Custom model data mappings produced by the converter: JSON text or a JSON-able object.
    generatedMappings: str | Mapping[str, Any] | list[Any]



class PackConverter(Protocol):
    def convert(self, source: BinaryIO, destination: Path, options: ConversionOptions) -> ConversionResult:
        ...



def mappingsToJson(mappings: Any) -> str:
    """Mapping document as JSON text; strings are assumed to already be JSON."""
    if isinstance(mappings, str):
        return mappings
    if isinstance(mappings, bytes):
        return mappings.decode("utf-8")
    return json.dumps(mappings, ensure_ascii=False, indent=2)



def resolveConverter(entry: str | None) -> PackConverter | None:
    """
    Resolve a converter from a "module:callable" entrypoint.

    The callable is either a converter instance (has .convert) or a zero-argument
    factory returning one. None/empty entry means no converter is configured.
    """
    if not entry:
        return None
    moduleName, _, attrName = entry.partition(":")
    if not moduleName or not attrName:
        raise ValueError(f"Invalid converter entrypoint '{entry}'. Expected 'module:callable'.")
    module = import_module(moduleName)
    target = getattr(module, attrName, None)
    if target is None:
        raise AttributeError(f"Entrypoint '{entry}' does not resolve to anything")
    if callable(getattr(target, "convert", None)) and not isinstance(target, type):
        return target
    if not callable(target):
        raise AttributeError(f"Entrypoint '{entry}' does not resolve to a callable")
    converter = target()
    if not callable(getattr(converter, "convert", None)):
        raise TypeError(f"Entrypoint '{entry}' returned {type(converter).__name__}, which has no convert()")
    return converter
