# tests/test_logging.py
"""Tests for loguru file-sink setup."""

from loguru import logger

from infrastructure.logging import get_log_directory, init_logging


def test_default_directory_under_home():
    assert get_log_directory().replace("\\", "/").endswith(".photowall/logs")


def test_sink_writes_daily_file(tmp_path):
    log_dir = tmp_path / "logs"
    try:
        assert init_logging(str(log_dir)) == log_dir
        logger.info("viewer started")
        logger.complete()
        files = list(log_dir.glob("viewer_*.log"))
        assert len(files) == 1
        assert "viewer started" in files[0].read_text(encoding="utf-8")
    finally:
        logger.remove()
