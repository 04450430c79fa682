"""
Layer 1.3 - TIMING BUDGET
=========================

All blocking waits of the robot go through a PacingPolicy:

- oscillator() : after PCA9685 mode changes (5 ms)
- after_write(): after every channel write inside a transition (2 ms)
- settle()     : between gait transitions (5 s)
- retry()      : before retrying a failed register access (5 ms)

Durations are microseconds. The sleep provider takes seconds, so the
default is time.sleep; tests pass NO_WAIT.
"""

import time
from dataclasses import dataclass
from typing import Callable

from quadwalk.hardware.absolute_truths import (
    OSCILLATOR_DELAY_US,
    WRITE_DELAY_US,
    SETTLE_DELAY_US,
    RETRY_DELAY_US,
)


@dataclass(frozen=True)
class PacingPolicy:
    write_delay_us: int = WRITE_DELAY_US
    settle_delay_us: int = SETTLE_DELAY_US
    oscillator_delay_us: int = OSCILLATOR_DELAY_US
    retry_delay_us: int = RETRY_DELAY_US
    sleep: Callable[[float], None] = time.sleep

    def _wait(self, micros):
        if micros > 0:
            self.sleep(micros / 1_000_000)

    def after_write(self):
        self._wait(self.write_delay_us)

    def settle(self):
        self._wait(self.settle_delay_us)

    def oscillator(self):
        self._wait(self.oscillator_delay_us)

    def retry(self):
        self._wait(self.retry_delay_us)


DEFAULT_PACING = PacingPolicy()

NO_WAIT = PacingPolicy(
    write_delay_us=0,
    settle_delay_us=0,
    oscillator_delay_us=0,
    retry_delay_us=0,
)
