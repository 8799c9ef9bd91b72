"""Fixtures for phonegap_serve tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from aiohttp.test_utils import unused_port

from phonegap_serve.core.logging_config import SERVE_LOGGERS, SUPPRESSED_LOGGERS
from tests.serve.support import FakePipeline


@pytest.fixture
def fake_pipeline() -> FakePipeline:
    return FakePipeline()


@pytest.fixture
def free_port() -> int:
    """A TCP port that was free a moment ago."""
    return unused_port()


@pytest.fixture
def www_dir(tmp_path: Path) -> Path:
    """App directory with an index page and a nested app page.

    Layout:
      www/index.html
      www/app/index.html
      www/css/app.css
      secret.txt (next to www, must never be served)
    """
    www = tmp_path / "www"
    (www / "app").mkdir(parents=True)
    (www / "css").mkdir()
    (www / "index.html").write_text("<h1>home</h1>", encoding="utf-8")
    (www / "app" / "index.html").write_text("<h1>app</h1>", encoding="utf-8")
    (www / "css" / "app.css").write_text("body { margin: 0; }", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("outside the root", encoding="utf-8")
    return www


@pytest.fixture(autouse=True)
def reset_serve_loggers() -> Generator[None, Any, None]:
    """Undo logger level changes made by configure_serve_logging()."""
    yield
    for name in (*SERVE_LOGGERS, *SUPPRESSED_LOGGERS, "aiohttp.web"):
        logging.getLogger(name).setLevel(logging.NOTSET)
