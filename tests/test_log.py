import json
import logging

from termbrot.log import init_log


def test_json_log_to_file(tmp_path):
    path = tmp_path / "termbrot.log"
    logger = init_log("debug", "json", str(path))
    logging.getLogger("termbrot.grid").debug("computed %d cells", 12)
    for handler in logger.handlers:
        handler.flush()

    record = json.loads(path.read_text().strip().splitlines()[-1])
    assert record["level"] == "DEBUG"
    assert record["logger"] == "termbrot.grid"
    assert record["msg"] == "computed 12 cells"


def test_unknown_level_and_format_fall_back(tmp_path):
    path = tmp_path / "out.log"
    logger = init_log("chatty", "xml", str(path))
    assert logger.level == logging.INFO
    logging.getLogger("termbrot.session").debug("hidden")
    logging.getLogger("termbrot.session").info("shown")
    for handler in logger.handlers:
        handler.flush()
    text = path.read_text()
    assert "hidden" not in text
    assert "INFO - shown" in text


def test_init_log_replaces_handlers(tmp_path):
    init_log("info", "text", str(tmp_path / "one.log"))
    logger = init_log("warn", "text", str(tmp_path / "two.log"))
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
