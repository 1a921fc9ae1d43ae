import pytest

from sortscope.playback import PlaybackController
from sortscope.scheduler import ManualClock, Scheduler


class RecordingSonifier:
    """Stands in for SonificationMapper; records what playback asked for."""

    def __init__(self):
        self.calls = []

    def value_to_frequency(self, value, max_value):
        return 200 + (value / max_value) * 600 if max_value else 200

    def play_tone(self, frequency, duration=0.1):
        self.calls.append(("tone", frequency))

    def play_comparison(self, v1, v2, max_value):
        self.calls.append(("compare", v1, v2, max_value))

    def play_swap(self, v1, v2, max_value):
        self.calls.append(("swap", v1, v2, max_value))


class FakeOutput:
    sample_rate = 8000

    def __init__(self):
        self.played = []
        self.closed = False

    def play(self, pcm, volume):
        self.played.append((pcm, volume))

    def close(self):
        self.closed = True


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def sonifier():
    return RecordingSonifier()


@pytest.fixture
def controller(sonifier, scheduler):
    return PlaybackController(sonifier, scheduler, speed=10)


def run_ticks(clock, scheduler, n, ms=10):
    for _ in range(n):
        clock.advance(ms)
        scheduler.run_due()
