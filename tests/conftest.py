import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_meshpolicy_logger():
    # CLI runs attach handlers to the shared logger; don't leak them across tests
    yield
    logger = logging.getLogger("meshpolicy")
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
