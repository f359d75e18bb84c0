import uuid

import pytest

from packdepot.core.errors import PackArchiveError, PackManifestError
from packdepot.packs.manifest import isManifestEntry, parseManifest, readArchiveManifest


PACK_UUID = "0f6a9d1c-5b0e-4a7b-9c3e-1d2f3a4b5c6d"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("manifest.json", True),
        ("pack_manifest.json", True),
        ("MyPack/manifest.json", True),
        ("Manifest.JSON", True),
        ("manifest.json.bak", False),
        ("textures/manifest_notes.txt", False),
        ("notmanifest.json", False),
    ],
)
def test_isManifestEntry(name, expected):
    assert isManifestEntry(name) is expected


def test_parseManifest_accepts_json5_comments_and_trailing_commas():
    text = """
    {
        // hand edited
        "format_version": 2,
        "header": {
            "uuid": "%s",
            "version": [1, 2, 3,],
            "min_engine_version": [1, 16, 0],
        },
    }
    """ % PACK_UUID
    manifest = parseManifest(text)
    assert manifest.packUuid == uuid.UUID(PACK_UUID)
    assert manifest.header.version == [1, 2, 3]
    assert manifest.header.minEngineVersion == [1, 16, 0]
    assert manifest.formatVersion == 2


@pytest.mark.parametrize(
    "raw",
    [
        b"\xff\xfe\x00garbage",
        b"{not json",
        b"[1, 2, 3]",
        b'{"header": {"uuid": "not-a-uuid"}}',
        b'{"header": {"uuid": "%s", "version": [1, -1, 0]}}' % PACK_UUID.encode(),
    ],
)
def test_parseManifest_rejects_unusable_documents(raw):
    with pytest.raises(PackManifestError):
        parseManifest(raw)


def test_readArchiveManifest_returns_manifest_with_uuid(tmp_path, makeZip, manifestFor):
    pack = makeZip(tmp_path / "pack.mcpack", [("manifest.json", manifestFor(PACK_UUID, [2, 0, 1]))])

    manifest = readArchiveManifest(pack)
    assert manifest is not None
    assert str(manifest.packUuid) == PACK_UUID
    assert manifest.header.version == [2, 0, 1]


def test_readArchiveManifest_skips_invalid_pack_manifest_before_valid_one(tmp_path, makeZip, manifestFor):
    pack = makeZip(
        tmp_path / "pack.zip",
        [
            ("pack_manifest.json", {"header": {"pack_id": "legacy", "name": "old style"}}),
            ("broken/manifest.json", "{ this is not json"),
            ("manifest.json", manifestFor(PACK_UUID)),
        ],
    )

    manifest = readArchiveManifest(pack)
    assert manifest is not None
    assert str(manifest.packUuid) == PACK_UUID


def test_readArchiveManifest_without_uuid_returns_none(tmp_path, makeZip, manifestFor):
    pack = makeZip(
        tmp_path / "pack.zip",
        [
            ("manifest.json", manifestFor(None)),
            ("textures/blocks/stone.png", b"\x89PNG"),
        ],
    )
    assert readArchiveManifest(pack) is None


def test_readArchiveManifest_without_any_manifest_returns_none(tmp_path, makeZip):
    pack = makeZip(tmp_path / "pack.zip", [("pack.mcmeta", {"pack": {"pack_format": 6}})])
    assert readArchiveManifest(pack) is None


def test_readArchiveManifest_corrupt_archive_raises_archive_error(tmp_path):
    broken = tmp_path / "broken.zip"
    broken.write_bytes(b"PK\x03\x04 definitely not a zip")

    with pytest.raises(PackArchiveError) as excInfo:
        readArchiveManifest(broken)
    assert "broken.zip" in str(excInfo.value)


def test_readArchiveManifest_missing_file_raises_archive_error(tmp_path):
    with pytest.raises(PackArchiveError):
        readArchiveManifest(tmp_path / "nope.zip")
