"""
Layer 4 - WALKING GAIT CYCLE
============================

This is the layer where poses become walking.

One cycle chains four transitions and lands back where it started:

    high -> low -> far -> close -> high

with a settle pause after each of the first three. Repeating the cycle
is continuous locomotion.

No planning. No feedback. Every cycle is identical.
"""

import logging

from quadwalk.hardware.pacing import DEFAULT_PACING
from quadwalk.layer2.poses import pose
from quadwalk.layer3.transition import Interpolation, transition

log = logging.getLogger(__name__)

GAIT_STEPS = 20

GAIT_SEQUENCE = (
    ("high", "low"),
    ("low", "far"),
    ("far", "close"),
    ("close", "high"),
)


def run_gait_cycle(device, steps=GAIT_STEPS, pacing=DEFAULT_PACING,
                   mode=Interpolation.TRUNCATE, abort_on_write_failure=True):
    """
    Run one closed gait cycle. Returns the four TransitionReports.
    """
    reports = []
    last = len(GAIT_SEQUENCE) - 1
    for n, (src, dst) in enumerate(GAIT_SEQUENCE):
        log.info("[GAIT] %s -> %s", src, dst)
        reports.append(
            transition(
                device, steps, pose(src), pose(dst),
                pacing=pacing,
                mode=mode,
                abort_on_write_failure=abort_on_write_failure,
            )
        )
        if n < last:
            pacing.settle()
    return reports


def walk(device, cycles=None, **kwargs):
    """
    Repeat run_gait_cycle. cycles=None walks until interrupted.

    Returns the number of completed cycles.
    """
    done = 0
    while cycles is None or done < cycles:
        run_gait_cycle(device, **kwargs)
        done += 1
        log.info("[GAIT] Cycle %d complete", done)
    return done


# -------------------------------------------------
# Smoke test - THIS WILL MOVE THE ROBOT
# -------------------------------------------------

if __name__ == "__main__":
    from quadwalk.hardware.pca9685 import init_pca

    logging.basicConfig(level=logging.INFO)
    print("[L4] Executing one gait cycle - robot WILL MOVE")
    with init_pca() as dev:
        run_gait_cycle(dev)
