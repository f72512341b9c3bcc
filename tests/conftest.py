import random

import pytest

from sneke.game import Engine


class FakeClock:
    """Millisecond clock the test moves by hand."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock(1_000)


@pytest.fixture
def engine(clock):
    return Engine(rng=random.Random(7), clock=clock)
