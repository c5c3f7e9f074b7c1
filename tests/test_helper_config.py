import logging

import pytest

from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger, setup_logging


@pytest.fixture
def config():
    return HelperConfig(logger=logging.getLogger("tests"))


def test_string_value_and_default(config, monkeypatch):
    monkeypatch.setenv("SOME_KEY", "  value ")
    assert config.get_string_val("some_key") == "value"
    assert config.get_string_val("UNSET_KEY_FOR_TEST", default="fallback") == "fallback"


def test_missing_required_value_raises(config, monkeypatch):
    monkeypatch.delenv("UNSET_KEY_FOR_TEST", raising=False)
    with pytest.raises(ValueError, match="UNSET_KEY_FOR_TEST"):
        config.get_string_val("UNSET_KEY_FOR_TEST")


def test_number_values(config, monkeypatch):
    monkeypatch.setenv("INT_KEY", "25")
    monkeypatch.setenv("FLOAT_KEY", "2.5")
    monkeypatch.setenv("BAD_KEY", "abc")
    assert config.get_number_val("INT_KEY") == 25
    assert config.get_number_val("FLOAT_KEY") == 2.5
    with pytest.raises(ValueError, match="not a valid number"):
        config.get_number_val("BAD_KEY")


def test_list_values(config, monkeypatch):
    monkeypatch.setenv("LIST_KEY", "[outline, other ,]")
    monkeypatch.setenv("BAD_LIST_KEY", "outline,other")
    assert config.get_list_val("LIST_KEY") == ["outline", "other"]
    with pytest.raises(ValueError, match="format"):
        config.get_list_val("BAD_LIST_KEY")


def test_setup_logging_writes_log_file(tmp_path, monkeypatch):
    monkeypatch.setenv("ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("TIMEZONE", "UTC")
    root = logging.getLogger()
    previous_handlers, previous_level = list(root.handlers), root.level

    try:
        logger = setup_logging()
        logger.info("cache ready", color="green")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = previous_handlers
        root.setLevel(previous_level)

    assert isinstance(logger, ColorLogger)
    assert "cache ready" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
