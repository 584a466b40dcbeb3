import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'

import pytest


class FixedRNG:
    """Stands in for np.random.RandomState; replays randint results in order."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def randint(self, low, high):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def fixed_rng():
    return FixedRNG
