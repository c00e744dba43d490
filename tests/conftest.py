import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

import logging

import pytest


@pytest.fixture(autouse=True)
def _engine_debug_logging(caplog):
    # Cascade dumps are emitted at DEBUG; keep them visible on failures.
    caplog.set_level(logging.DEBUG, logger="tilecascade")
    yield
