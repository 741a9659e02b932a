import logging
import sys

from csvframe.logging import configure_logging, get_logger


def test_handler_uses_current_stderr(monkeypatch, capsys):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    configure_logging(logging.INFO)
    assert len(root.handlers) == 1
    assert root.handlers[0].stream is sys.stderr
    get_logger("csvframe.test").info("hello")
    assert "[INFO] csvframe.test: hello" in capsys.readouterr().err


def test_configure_twice_keeps_one_handler(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    configure_logging(logging.INFO)
    configure_logging(logging.DEBUG)
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
