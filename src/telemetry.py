"""
Attempt-rate telemetry shared by all search workers.
"""

import itertools
import math
import sys
import threading
import time
from typing import NamedTuple

from colorama import Fore, Style

HASHRATE_UNITS = ["H/s", "KH/s", "MH/s", "GH/s", "TH/s", "PH/s", "EH/s"]
STATUS_INTERVAL = 1.0
STATUS_LABEL = "XELIS Vanity"
# Elapsed windows shorter than this carry no usable rate
MIN_ELAPSED = 0.001


class RateSample(NamedTuple):
    attempts: int
    elapsed: float

    @property
    def rate(self) -> float:
        if self.attempts <= 0 or self.elapsed < MIN_ELAPSED:
            return 0.0
        return self.attempts / self.elapsed


class RateTracker:
    """
    Attempt counter written by every worker, read by one periodic task.

    ``increment`` advances an ``itertools.count``, which is atomic under the
    GIL, so workers never take a lock. ``snapshot`` swaps in a fresh counter
    and reads the old one. A worker that fetched the old counter before the
    swap but advances it after the read loses that increment, so counts are
    approximate and may run slightly low.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._counter = itertools.count()
        self._lock = threading.Lock()
        self._last_time = clock()
        self._total = 0

    def increment(self):
        next(self._counter)

    def snapshot(self) -> RateSample:
        with self._lock:
            counter, self._counter = self._counter, itertools.count()
            attempts = next(counter)
            now = self._clock()
            elapsed = now - self._last_time
            self._last_time = now
            self._total += attempts
        return RateSample(attempts, elapsed)

    @property
    def total(self) -> int:
        """Attempts counted up to the last snapshot."""
        with self._lock:
            return self._total


def format_hashrate(rate: float) -> str:
    if not math.isfinite(rate) or rate < 0:
        rate = 0.0
    unit = 0
    # compare the displayed value so 999.999 becomes 1.00 KH/s, not 1000.00 H/s
    while round(rate, 2) >= 1000 and unit < len(HASHRATE_UNITS) - 1:
        rate /= 1000
        unit += 1
    return f"{rate:.2f} {HASHRATE_UNITS[unit]}"


class StatusLine(threading.Thread):
    """Redraws the current attempt rate once per interval."""

    def __init__(self, tracker: RateTracker, stop_event: threading.Event,
                 interval: float = STATUS_INTERVAL, color: bool = True, stream=None):
        super().__init__(name="status-line", daemon=True)
        self.tracker = tracker
        self.stop_event = stop_event
        self.interval = interval
        self.color = color
        self.stream = stream

    def _paint(self, color: str, text: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def render(self) -> str:
        rate = format_hashrate(self.tracker.snapshot().rate)
        return (
            f"{self._paint(Fore.BLUE, STATUS_LABEL)} | "
            f"{self._paint(Fore.GREEN, rate)} "
            f"{self._paint(Fore.LIGHTBLACK_EX, '>>')} "
        )

    def run(self):
        while not self.stop_event.wait(self.interval):
            print(self.render(), end="\r", flush=True, file=sys.stdout if self.stream is None else self.stream)
