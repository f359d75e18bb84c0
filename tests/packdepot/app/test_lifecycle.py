import json
import uuid

import pytest

from packdepot.app import lifecycle
from packdepot.app.context import PROCESS_REGISTRY
from packdepot.app.globals import PACK_LIBRARY_SERVICE, getHashLedger, getPackCatalog, getPackLibrary
from packdepot.core.errors import ServiceMissingError
from packdepot.packs.ledger import LEDGER_FIELD


@pytest.fixture(autouse=True)
def _clean_registry():
    PROCESS_REGISTRY.unregister(PACK_LIBRARY_SERVICE)
    yield
    PROCESS_REGISTRY.unregister(PACK_LIBRARY_SERVICE)


def test_globals_before_startup_raise():
    with pytest.raises(ServiceMissingError):
        getPackLibrary()


def test_startup_registers_library_and_shutdown_saves_cache(tmp_path, makeZip, manifestFor, fakeConverter):
    packUuid = str(uuid.uuid4())
    makeZip(tmp_path / "packs" / "bedrock" / "ready.mcpack", [("manifest.json", manifestFor(packUuid))])
    javaFile = tmp_path / "packs" / "java" / "old.zip"
    javaFile.parent.mkdir(parents=True)
    javaFile.write_bytes(b"java pack bytes")

    library = lifecycle.startup({"packs": {"root": str(tmp_path)}}, converter=fakeConverter)

    assert getPackLibrary() is library
    assert packUuid in getPackCatalog()
    assert len(getPackCatalog()) == 2
    assert len(getHashLedger()) == 1

    lifecycle.shutdown()

    with pytest.raises(ServiceMissingError):
        getPackLibrary()
    onDisk = json.loads((tmp_path / "packs" / "cache.json").read_text(encoding="utf-8"))
    assert len(onDisk[LEDGER_FIELD]) == 1


def test_shutdown_without_startup_is_a_noop():
    lifecycle.shutdown()


def test_packLifespan_unregisters_on_exit(tmp_path):
    with lifecycle.packLifespan({"packs": {"root": str(tmp_path), "convertJavaPacks": False}}) as library:
        assert getPackLibrary() is library
        assert (tmp_path / "packs" / "java").is_dir()
    assert PROCESS_REGISTRY.get(PACK_LIBRARY_SERVICE) is None


def test_startup_configures_logging_from_settings(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(lifecycle, "configureLogging", lambda **kwargs: calls.append(kwargs))
    tree = {
        "packs": {"root": str(tmp_path), "convertJavaPacks": False},
        "logging": {"devMode": False, "file": str(tmp_path / "pd.log")},
    }

    lifecycle.startup(tree, configureLogs=True)

    assert calls == [{"devMode": False, "logFile": str(tmp_path / "pd.log")}]


def test_registry_require_and_overwrite():
    with pytest.raises(ServiceMissingError, match="shelves are bare"):
        getPackLibrary()
    with pytest.raises(ServiceMissingError, match="'packs.other'"):
        PROCESS_REGISTRY.require("packs.other")

    PROCESS_REGISTRY.register(PACK_LIBRARY_SERVICE, "first")
    with pytest.raises(ValueError):
        PROCESS_REGISTRY.register(PACK_LIBRARY_SERVICE, "second")
    PROCESS_REGISTRY.register(PACK_LIBRARY_SERVICE, "second", overwrite=True)
    assert PROCESS_REGISTRY.require(PACK_LIBRARY_SERVICE) == "second"
