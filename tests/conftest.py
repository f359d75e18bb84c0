import json
import sys
import uuid
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

import pytest

from packdepot.app.settings import PackSettings
from packdepot.packs.converter import ConversionOptions, ConversionResult, InvalidResourcePackError



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



def bedrockManifest(packUuid: str | None, version: list[int] | None = None, name: str = "Test Pack") -> dict[str, Any]:
    header: dict[str, Any] = {"name": name, "version": version or [1, 0, 0]}
    if packUuid is not None:
        header["uuid"] = packUuid
    return {
        "format_version": 2,
        "header": header,
        "modules": [{"type": "resources", "uuid": str(uuid.uuid4()), "version": [1, 0, 0]}],
    }



def writeZip(path: Path, entries: list[tuple[str, Any]]) -> Path:
    """Write a zip archive; dict entries are JSON-encoded, str/bytes written as-is."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries:
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            archive.writestr(name, content)
    return path



class FakeConverter:
    """Stands in for the external converter: writes a bedrock pack and returns mappings."""

    def __init__(self, *, reject: set[str] | None = None, ioFail: set[str] | None = None) -> None:
        self.calls: list[ConversionOptions] = []
        self.reject = {value.upper() for value in (reject or set())}
        self.ioFail = {value.upper() for value in (ioFail or set())}

    def convert(self, source: BinaryIO, destination: Path, options: ConversionOptions) -> ConversionResult:
        self.calls.append(options)
        source.read()
        options.logSink(f"Converting {options.name}")
        if options.hash in self.reject:
            raise InvalidResourcePackError("pack.mcmeta is missing")
        if options.hash in self.ioFail:
            destination.write_bytes(b"partial")
            raise OSError("disk full")
        writeZip(
            destination,
            [("manifest.json", bedrockManifest(str(options.packUuid), list(options.version), name=options.name))],
        )
        options.logSink("Done")
        return ConversionResult(generatedMappings={"minecraft:stick": {"1": "stick_1"}, "hash": options.hash})



@pytest.fixture()
def fakeConverter() -> FakeConverter:
    return FakeConverter()



@pytest.fixture()
def packSettings(tmp_path: Path) -> PackSettings:
    return PackSettings(root=tmp_path)



@pytest.fixture()
def makeZip():
    return writeZip



@pytest.fixture()
def manifestFor():
    return bedrockManifest



@pytest.fixture()
def converterFactory():
    return FakeConverter
