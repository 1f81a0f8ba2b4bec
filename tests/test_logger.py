from datetime import datetime

import pytest

from policydeploy import logger


def test_current_time_format():
    text = logger.current_time_str()
    parsed = datetime.strptime(text, "%H:%M:%S")
    assert parsed.strftime("%H:%M:%S") == text


def test_plain_message():
    assert logger.format_message("INFO", "hello", False, False) == "hello"


def test_colored_message_without_prefix():
    text = logger.format_message("WARN", "careful", True, False)
    assert text == "\033[1;33m" + "careful" + "\033[0m"


def test_prefixed_message():
    text = logger.format_message("ERROR", "boom", False, True)
    assert text.startswith("[ERROR ")
    assert text.endswith("] boom")
    assert len(text) == len("[ERROR 00:00:00] boom")
    stamp = text[len("[ERROR "):len("[ERROR 00:00:00")]
    assert datetime.strptime(stamp, "%H:%M:%S").strftime("%H:%M:%S") == stamp


def test_non_string_message():
    assert logger.format_message("DEBUG", 3.5, False, False) == "3.5"


def test_unknown_level():
    with pytest.raises(ValueError):
        logger.format_message("TRACE", "x", False, False)


def test_info_goes_to_stdout(capsys):
    logger.info("ready")
    out, err = capsys.readouterr()
    assert "[INFO " in out
    assert "ready" in out
    assert err == ""


def test_warn_goes_to_stdout(capsys):
    logger.warn("slow")
    out, err = capsys.readouterr()
    assert "[WARN " in out and "slow" in out
    assert err == ""


def test_error_goes_to_stderr(capsys):
    logger.error("failed")
    out, err = capsys.readouterr()
    assert out == ""
    assert "[ERROR " in err and "failed" in err


def test_debug_silent_by_default(capsys, monkeypatch):
    monkeypatch.delenv("PRINT_INFO", raising=False)
    logger.debug("hidden")
    assert capsys.readouterr().out == ""


def test_debug_enabled_by_env(capsys, monkeypatch):
    monkeypatch.setenv("PRINT_INFO", "1")
    logger.debug("shown")
    out = capsys.readouterr().out
    assert "[DEBUG " in out and "shown" in out