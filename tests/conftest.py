import logging

import pytest

from termbrot.session import FractalSession
from termbrot.state import Parameters, ViewState
from termbrot.viewport import Viewport


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger = logging.getLogger("termbrot")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def small_state():
    return ViewState(viewport=Viewport(rows=12, cols=24), params=Parameters(max_iterations=40))


@pytest.fixture
def session(small_state):
    s = FractalSession(small_state)
    yield s
    s.close()
