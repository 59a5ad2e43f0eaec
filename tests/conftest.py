import pytest

from config.settings import AnalysisConfig
from tests.leg_factory import leg_set


@pytest.fixture
def config():
    return AnalysisConfig()


@pytest.fixture
def butterfly_legs():
    # Net debit of 3: break-evens at 93 and 107
    return leg_set((90, "C", 12, 1), (100, "C", 5, -2), (110, "C", 1, 1))


@pytest.fixture
def straddle_legs():
    return leg_set((100, "C", 5, 1), (100, "P", 4, 1))


@pytest.fixture
def credit_spread_legs():
    return leg_set((90, "C", 8, -1), (100, "C", 3, 1))
