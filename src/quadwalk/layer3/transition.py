"""
Layer 3 - POSE TRANSITIONS
==========================

Moves all 12 servos from one pose to another over a fixed number of
steps. Channels are synchronized at step granularity: every channel
reaches its step-k pulse before step k+1 starts.

Interpolation modes:

    TRUNCATE  start + step * trunc((goal - start) / steps)
              Increment truncated before it is scaled, so small ranges
              repeat values. The last step writes the goal itself.
    ROUND     start + round((goal - start) * step / steps)

Responsibilities:
- Compute intermediate pulses per channel per step
- Refuse pulses outside a channel's limits
- Write counter units to the chip and report every failure
- Pace writes through the PacingPolicy

NON-RESPONSIBILITIES:
- No pose definitions
- No gait sequencing
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from quadwalk.hardware.absolute_truths import SERVO_COUNT
from quadwalk.hardware.errors import (
    PulseLimitError,
    RegisterWriteError,
    TransitionAborted,
)
from quadwalk.hardware.pacing import DEFAULT_PACING
from quadwalk.hardware.pulse import pulse_to_counter, trunc_div

log = logging.getLogger(__name__)


class Interpolation(Enum):
    TRUNCATE = "truncate"
    ROUND = "round"


@dataclass
class TransitionReport:
    steps: int
    writes: int = 0
    failures: list = field(default_factory=list)
    positions: Tuple[Optional[int], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def _round_div(num: int, den: int) -> int:
    # half away from zero
    q = (2 * abs(num) + den) // (2 * den)
    return q if num >= 0 else -q


def interpolate_pulse(start: int, goal: int, step: int, steps: int,
                      mode: Interpolation = Interpolation.TRUNCATE) -> int:
    if step >= steps:
        return goal
    diff = goal - start
    if Interpolation(mode) is Interpolation.ROUND:
        return start + _round_div(diff * step, steps)
    return start + step * trunc_div(diff, steps)


def _check_args(steps, start, goal):
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    if len(start) != SERVO_COUNT or len(goal) != SERVO_COUNT:
        raise ValueError(
            f"poses need {SERVO_COUNT} channels, got {len(start)} and {len(goal)}"
        )


def plan_transition(start: Sequence[int], goal: Sequence[int], steps: int,
                    mode: Interpolation = Interpolation.TRUNCATE) -> List[Tuple[int, ...]]:
    """
    Intermediate pose vectors for steps 1..steps. The last one is goal.
    """
    _check_args(steps, start, goal)
    return [
        tuple(
            s if s == g else interpolate_pulse(s, g, step, steps, mode)
            for s, g in zip(start, goal)
        )
        for step in range(1, steps + 1)
    ]


def transition(device, steps: int, start: Sequence[int], goal: Sequence[int],
               pacing=DEFAULT_PACING,
               mode: Interpolation = Interpolation.TRUNCATE,
               abort_on_write_failure: bool = True) -> TransitionReport:
    """
    Drive every channel from start to goal in `steps` steps.

    Channels whose start equals their goal are never written. Each
    channel write is followed by pacing.after_write().

    Raises PulseLimitError before writing a pulse outside the channel's
    limits, and TransitionAborted on a failed register write when
    abort_on_write_failure is set. Otherwise failed writes are collected
    in the returned report.
    """
    _check_args(steps, start, goal)
    mode = Interpolation(mode)
    report = TransitionReport(steps=steps)

    log.info("[MOVE] Transition over %d steps (%s)", steps, mode.value)

    for step in range(1, steps + 1):
        for i in range(SERVO_COUNT):
            if start[i] == goal[i]:
                continue

            pulse_us = interpolate_pulse(start[i], goal[i], step, steps, mode)
            lower, upper = device.limits_for(i)
            if not (lower <= pulse_us <= upper):
                log.error("[MOVE] Channel %d pulse %dus outside [%d, %d]", i, pulse_us, lower, upper)
                raise PulseLimitError(i, pulse_us, lower, upper)

            counter = pulse_to_counter(pulse_us)
            log.debug("Step [%d] - Servo [%d] - pulse_us [%d]", step, i, pulse_us)

            results = device.set_channel_off(i, counter)
            report.writes += len(results)
            failed = [r for r in results if not r.ok]
            if failed:
                report.failures.extend(failed)
                if abort_on_write_failure:
                    report.positions = tuple(device.positions)
                    first = failed[0]
                    cause = RegisterWriteError(first.register, first.value, first.attempts, first.error)
                    log.error("[MOVE] Aborting at step %d, channel %d: %s", step, i, cause)
                    raise TransitionAborted(report, cause)
            else:
                device.positions[i] = pulse_us

            pacing.after_write()

    report.positions = tuple(device.positions)
    if report.failures:
        log.warning("[MOVE] Transition finished with %d failed write(s)", len(report.failures))
    return report
