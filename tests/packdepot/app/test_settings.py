from pathlib import Path

import pytest
from pydantic import ValidationError

from packdepot.app.settings import (
    DEFAULT_SETTINGS,
    SETTINGS_ENV_VAR,
    PackSettings,
    deepMerge,
    getByPath,
    loadSettings,
    loadUserSettings,
    settings,
    settingsBool,
)


def test_deepMerge_merges_objects_and_replaces_everything_else():
    left = {"packs": {"root": ".", "conversion": {"version": [1, 0, 0], "author": "a"}}, "x": [1]}
    right = {"packs": {"conversion": {"version": [2]}}, "x": [2, 3]}

    merged = deepMerge(left, right)

    assert merged == {"packs": {"root": ".", "conversion": {"version": [2], "author": "a"}}, "x": [2, 3]}
    assert left["packs"]["conversion"]["version"] == [1, 0, 0]


def test_getByPath():
    tree = {"packs": {"cache": {"saveAfterConversion": True}}}
    assert getByPath(tree, "packs.cache.saveAfterConversion") is True
    assert getByPath(tree, "packs.missing", "fallback") == "fallback"
    assert getByPath(tree, "packs..cache") is None


def test_loadUserSettings_reads_json5(tmp_path):
    file = tmp_path / "packdepot.json5"
    file.write_text("{ packs: { convertJavaPacks: false, }, // off\n }", encoding="utf-8")
    assert loadUserSettings(file) == {"packs": {"convertJavaPacks": False}}


@pytest.mark.parametrize("content", ["{ broken", "[1, 2]"])
def test_loadUserSettings_bad_file_yields_empty(tmp_path, content):
    file = tmp_path / "packdepot.json5"
    file.write_text(content, encoding="utf-8")
    assert loadUserSettings(file) == {}


def test_loadUserSettings_missing_file_yields_empty(tmp_path):
    assert loadUserSettings(tmp_path / "nope.json5") == {}


def test_PackSettings_defaults_match_default_tree():
    fromTree = PackSettings.fromSettings(DEFAULT_SETTINGS)
    assert fromTree == PackSettings()
    assert fromTree.chunkSize == 102400
    assert fromTree.conversionVersion == (1, 0, 0)
    assert fromTree.conversionAuthor == "packdepot"
    assert fromTree.saveCacheAfterConversion is False


def test_PackSettings_fromSettings_overrides(tmp_path):
    tree = deepMerge(
        DEFAULT_SETTINGS,
        {
            "packs": {
                "root": str(tmp_path),
                "debugConversionLog": True,
                "conversion": {"version": [3, 1], "deterministicUuid": True, "converter": "mod:conv"},
                "cache": {"saveAfterConversion": True},
            }
        },
    )
    packSettings = PackSettings.fromSettings(tree)

    assert packSettings.root == Path(str(tmp_path))
    assert packSettings.debugConversionLog is True
    assert packSettings.conversionVersion == (3, 1, 0)
    assert packSettings.deterministicUuid is True
    assert packSettings.converterEntrypoint == "mod:conv"
    assert packSettings.saveCacheAfterConversion is True


def test_PackSettings_rejects_non_positive_chunk_size():
    with pytest.raises(ValidationError):
        PackSettings(chunkSize=0)


def test_settings_accessors_over_explicit_tree():
    tree = {"logging": {"devMode": False, "file": "logs/pd.log"}, "packs": {"convertJavaPacks": 0}}

    assert settings("logging.file", tree=tree) == "logs/pd.log"
    assert settings("logging.missing", "fallback", tree=tree) == "fallback"
    assert settingsBool("logging.devMode", True, tree=tree) is False
    assert settingsBool("packs.convertJavaPacks", True, tree=tree) is False
    assert settingsBool("packs.absent", True, tree=tree) is True


def test_settings_accessors_read_user_file_from_env(tmp_path, monkeypatch):
    file = tmp_path / "custom.json5"
    file.write_text("{ packs: { debugConversionLog: true, chunkSize: 4096 } }", encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(file))
    loadSettings.cache_clear()
    try:
        assert settingsBool("packs.debugConversionLog") is True
        assert settings("packs.chunkSize") == 4096
        assert settings("packs.conversion.author") == "packdepot"
        assert PackSettings.fromSettings().chunkSize == 4096
    finally:
        loadSettings.cache_clear()
