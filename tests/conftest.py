from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tsdocgen.config import DocgenConfig
from tsdocgen.process import Process


@pytest.fixture
def config(tmp_path: Path) -> DocgenConfig:
    """Provide a project configuration rooted at the pytest tmp_path."""
    (tmp_path / "src").mkdir()
    return DocgenConfig(root=tmp_path, project_name="my-lib", project_homepage="https://github.com/acme/my-lib")


@pytest.fixture
def process(tmp_path: Path) -> Process:
    return Process(cwd=tmp_path, platform="linux")


@pytest.fixture(autouse=True)
def _reset_tsdocgen_logger():
    """Undo configure_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger("tsdocgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
