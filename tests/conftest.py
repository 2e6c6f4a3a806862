"""Keep coreinject's debug logging out of test output, except for tests asserting on logs."""

import logging

import pytest


@pytest.fixture(autouse=True)
def quiet_library_logs(request):
    if "caplog" in request.fixturenames:
        yield
        return

    logger = logging.getLogger("coreinject")
    original_level = logger.level
    logger.setLevel(logging.WARNING)
    yield
    logger.setLevel(original_level)
