"""Pytest configuration for unit tests.

Unit tests check the IR, the rules and the simplifier in isolation. Rule
soundness is proven with Z3 and cross-checked with the concrete evaluator.
"""

import random

import pytest

from exprsimp.core import LoggerConfigurator


@pytest.fixture
def rng():
    """Deterministic random source so failures are reproducible."""
    return random.Random(0x5EED)


@pytest.fixture
def simplifier_debug():
    """Turn DEBUG on for the simplifier logger for the duration of a test."""
    LoggerConfigurator.set_level("ExprSimp.simplifier", "DEBUG")
    yield
    LoggerConfigurator.set_level("ExprSimp.simplifier", "INFO")
