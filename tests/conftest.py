"""
Pytest configuration and shared fixtures for the test suite.
"""

import logging
import random

import pytest


def make_random_bytes(size: int, seed: int = 1234) -> bytes:
    """Deterministic pseudo-random buffer."""
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(size))


@pytest.fixture
def random_data():
    """Factory for seeded pseudo-random buffers."""
    return make_random_bytes


@pytest.fixture
def zero_data() -> bytes:
    """50,000 zero bytes."""
    return bytes(50000)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handler changes made by configure_logging."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
