"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.adaptive.engine import PracticeEngine  # noqa: E402
from src.core.operators import Operator  # noqa: E402
from src.persistence.fact_store import FactStore  # noqa: E402
from src.persistence.models import FactMastery  # noqa: E402
from src.persistence.repository import InMemoryRepository  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (full practice loop)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class ScriptedRandom(random.Random):
    """
    Random source whose random() replays a script.

    Everything else (randint, choice, shuffle) comes from the seeded base
    generator. Once the script runs out, random() falls back to it too.
    """

    def __init__(self, script=(), seed=1234):
        super().__init__(seed)
        self.script = list(script)

    def random(self):
        if self.script:
            return self.script.pop(0)
        return super().random()

    # Defined here so randint/choice/shuffle keep drawing bits instead of random()
    def getrandbits(self, k):
        return super().getrandbits(k)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def scripted_rng():
    """Factory for a ScriptedRandom with the given random() values."""

    def _make(*values):
        return ScriptedRandom(values)

    return _make


@pytest.fixture
def repository():
    """Empty in-memory repository."""
    return InMemoryRepository()


@pytest.fixture
def store(repository):
    """Fact store over an in-memory repository."""
    return FactStore.open(repository)


@pytest.fixture
def engine(store, rng):
    """Practice engine with a seeded random source."""
    return PracticeEngine(store, rng=rng)


@pytest.fixture
def make_fact():
    """Build a FactMastery from a compact description."""

    def _make(operand1, operand2, operator="+", strength=0, attempts=0, correct=0):
        fact = FactMastery.new(operand1, operand2, Operator.parse(operator))
        fact.strength = strength
        fact.attempts = attempts
        fact.correct = correct
        return fact

    return _make


@pytest.fixture
def sample_document():
    """A stored mastery document in wire form."""
    return {
        "factMastery": {
            "3+7": {"operand1": 3, "operand2": 7, "operator": "+", "strength": 2, "attempts": 2, "correct": 1},
            "12÷4": {"operand1": 12, "operand2": 4, "operator": "÷", "strength": 5, "attempts": 4, "correct": 4},
        },
        "gradeProgress": {
            "3": {"currentMaxAddend": 7, "currentMaxFactor": 5},
        },
    }
