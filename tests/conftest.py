from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture
def tree_builder(tmp_path: Path) -> TreeBuilder:
    """Provide a reusable tree builder rooted at the pytest tmp_path."""
    return TreeBuilder(tmp_path)


@pytest.fixture
def cachewarm_caplog(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture cachewarm records even after configure_logging disabled propagation."""
    logger = logging.getLogger("cachewarm")
    previous = logger.propagate
    logger.propagate = True
    caplog.set_level(logging.DEBUG, logger="cachewarm")
    yield caplog
    logger.propagate = previous
