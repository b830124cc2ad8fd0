import logging
import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so `eqsolver` and `main` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


@pytest.fixture
def restore_eqsolver_logger():
    logger = logging.getLogger("eqsolver")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
