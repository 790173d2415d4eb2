import logging
import os
from pathlib import Path
from typing import List

import pytest

# Run Qt headless so the suite works without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from mathwiki.model.content import Page
from tests.fixtures import sample_pages, write_corpus


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    return write_corpus(tmp_path)


@pytest.fixture
def pages() -> List[Page]:
    return [Page.from_dict(p) for p in sample_pages()]


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers setup_logging() bound to a test's captured streams."""
    yield
    logger = logging.getLogger("mathwiki")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
