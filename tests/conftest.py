from __future__ import annotations

import logging
import os

# Keep test runs from writing log files into the project tree
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")

from pathlib import Path

import pytest
from PIL import Image

import api.core.logging as app_logging


@pytest.fixture
def png_image(tmp_path: Path) -> Path:
    """640x480 white PNG on disk."""
    path = tmp_path / "scan.png"
    Image.new("RGB", (640, 480), color=(255, 255, 255)).save(path)
    return path


@pytest.fixture
def credentials_file(tmp_path: Path) -> Path:
    """Key file without a credential type: exists, but google.auth rejects it."""
    path = tmp_path / "key.json"
    path.write_text("{}", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to a test's captured streams once the test is done."""
    yield
    logger = logging.getLogger(app_logging.ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    app_logging._default_logger = None
