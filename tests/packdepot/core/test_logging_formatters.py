import json
import logging
import sys

from packdepot.core.logging import clearLogContext, getLogContext, getLogger, logContext, setLogContext
from packdepot.core.logging.formatters import DevFormatter, JsonFormatter


def make_record(message="Converted pack", level=logging.INFO, exc_info=None):
    return logging.LogRecord("packdepot.packs.conversion", level, __file__, 1, message, (), exc_info)


def test_logContext_is_scoped_and_nests():
    clearLogContext()
    with logContext(packFile="a.zip"):
        with logContext(packHash="ABC123", conversionId=None):
            assert getLogContext() == {"packFile": "a.zip", "packHash": "ABC123"}
        assert getLogContext() == {"packFile": "a.zip"}
    assert getLogContext() is None

    setLogContext(packFile="b.zip")
    assert getLogContext() == {"packFile": "b.zip"}
    clearLogContext()


def test_dev_formatter_shows_pack_context():
    formatter = DevFormatter()
    with logContext(packFile="a.zip", packHash="ABC123"):
        line = formatter.format(make_record())
    assert line == "INFO: [packdepot.packs.conversion] Converted pack [a.zip/ABC123]"
    assert formatter.format(make_record()) == "INFO: [packdepot.packs.conversion] Converted pack"


def test_json_formatter_emits_one_json_line_with_context():
    formatter = JsonFormatter()
    try:
        raise OSError("disk full")
    except OSError:
        excInfo = sys.exc_info()

    with logContext(packHash="DEF456"):
        line = formatter.format(make_record("failed", logging.ERROR, excInfo))

    assert "\n" not in line
    data = json.loads(line)
    assert data["level"] == "error"
    assert data["msg"] == "failed"
    assert data["ctx"] == {"packHash": "DEF456"}
    assert data["exc"]["type"] == "OSError"
    assert data["exc"]["message"] == "disk full"


def test_getLogger_side_prefix():
    assert getLogger("packs", side="server").name == "server.packs"
    assert getLogger(" packs ").name == "packs"
