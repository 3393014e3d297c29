import pytest

from trend.application.pacer import Pacer


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_call_does_not_wait():
    clock = FakeClock()
    pacer = Pacer(1.0, clock=clock, sleep=clock.sleep)
    assert pacer.wait() == 0.0
    assert clock.sleeps == []


def test_wait_keeps_minimum_interval():
    clock = FakeClock()
    pacer = Pacer(1.0, clock=clock, sleep=clock.sleep)
    pacer.wait()
    clock.now += 0.25
    assert pacer.wait() == pytest.approx(0.75)
    clock.now += 5
    assert pacer.wait() == 0.0
    assert clock.sleeps == [pytest.approx(0.75)]


def test_reset_forgets_last_call():
    clock = FakeClock()
    pacer = Pacer(1.0, clock=clock, sleep=clock.sleep)
    pacer.wait()
    pacer.reset()
    assert pacer.wait() == 0.0


def test_negative_interval_is_rejected():
    with pytest.raises(ValueError):
        Pacer(-1)
