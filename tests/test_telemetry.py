import io
import math
import threading

import pytest

from telemetry import RateSample, RateTracker, StatusLine, format_hashrate


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_rate_is_attempts_over_elapsed(clock):
    tracker = RateTracker(clock=clock)
    for _ in range(500):
        tracker.increment()
    clock.now += 2.0

    sample = tracker.snapshot()
    assert sample == RateSample(500, 2.0)
    assert sample.rate == pytest.approx(250.0)


def test_snapshot_resets_window(clock):
    tracker = RateTracker(clock=clock)
    for _ in range(10):
        tracker.increment()
    clock.now += 1.0
    tracker.snapshot()

    for _ in range(3):
        tracker.increment()
    clock.now += 0.5
    sample = tracker.snapshot()
    assert sample.attempts == 3
    assert sample.rate == pytest.approx(6.0)
    assert tracker.total == 13


def test_no_attempts_reports_zero(clock):
    tracker = RateTracker(clock=clock)
    clock.now += 1.0
    assert tracker.snapshot().rate == 0.0


def test_zero_elapsed_reports_zero(clock):
    tracker = RateTracker(clock=clock)
    for _ in range(42):
        tracker.increment()
    rate = tracker.snapshot().rate
    assert rate == 0.0
    assert math.isfinite(rate)


def test_concurrent_increments_are_counted(clock):
    tracker = RateTracker(clock=clock)

    def spin():
        for _ in range(10_000):
            tracker.increment()

    threads = [threading.Thread(target=spin) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    clock.now += 1.0
    assert tracker.snapshot().attempts == 40_000


@pytest.mark.parametrize(
    "rate, expected",
    [
        (0, "0.00 H/s"),
        (999.4, "999.40 H/s"),
        (999.999, "1.00 KH/s"),
        (999_999.9, "1.00 MH/s"),
        (1500, "1.50 KH/s"),
        (2_500_000, "2.50 MH/s"),
        (float("nan"), "0.00 H/s"),
        (float("inf"), "0.00 H/s"),
        (-5, "0.00 H/s"),
    ],
)
def test_format_hashrate(rate, expected):
    assert format_hashrate(rate) == expected


def test_format_hashrate_caps_at_largest_unit():
    assert format_hashrate(1e24).endswith(" EH/s")


def test_status_line_render(clock):
    tracker = RateTracker(clock=clock)
    for _ in range(3000):
        tracker.increment()
    clock.now += 1.0
    status = StatusLine(tracker, threading.Event(), color=False)
    assert status.render() == "XELIS Vanity | 3.00 KH/s >> "


def test_status_line_stops_with_event():
    stop = threading.Event()
    out = io.StringIO()
    status = StatusLine(RateTracker(), stop, interval=0.01, color=False, stream=out)
    status.start()
    threading.Event().wait(0.1)
    stop.set()
    status.join(timeout=5)
    assert not status.is_alive()
    assert "XELIS Vanity | " in out.getvalue()
