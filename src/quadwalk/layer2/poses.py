"""
Layer 2 - NAMED POSES
=====================

The four stances the gait moves between (low, high, close, far), built
from the Layer 0 limit table.

Leg wiring (as mounted):

    leg  swing  lift    swing lower / upper
    FL     0    1, 2    back  / front
    BL     3    4, 5    front / back
    FR     6    7, 8    front / back
    BR     9   10, 11   back  / front

Every pose keeps the swing channels where they are and moves only the
lift pairs. Which bound of each lift servo means "high" or "far"
depends on how the servo is mirrored on that leg, so the selections
below are measured facts, not math.

Responsibilities:
- Name each channel's role (swing / lift) per leg
- Select lower or upper bound per channel per pose
- Expose the resulting 12-channel pulse vectors (microseconds)

NON-RESPONSIBILITIES:
- No hardware I/O
- No interpolation
- No timing
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from quadwalk.hardware.absolute_truths import LIMIT_TABLE, SERVO_COUNT

LOWER = 0
UPPER = 1

POSE_NAMES = ("low", "high", "close", "far")


@dataclass(frozen=True)
class Leg:
    name: str
    swing: int
    lift: Tuple[int, int]

    @property
    def channels(self):
        return (self.swing,) + self.lift


LEGS = (
    Leg("FL", 0, (1, 2)),
    Leg("BL", 3, (4, 5)),
    Leg("FR", 6, (7, 8)),
    Leg("BR", 9, (10, 11)),
)

# -------------------------------------------------
# Swing channels: same bound in every pose
# -------------------------------------------------
SWING_BOUND = {
    "FL": UPPER,   # front
    "BL": UPPER,   # back
    "FR": LOWER,   # front
    "BR": LOWER,   # back
}

# -------------------------------------------------
# Lift pairs: (first, second) bound per pose
# -------------------------------------------------
LIFT_BOUNDS = {
    "FL": {"low": (LOWER, LOWER), "high": (UPPER, UPPER), "close": (LOWER, UPPER), "far": (UPPER, LOWER)},
    "BL": {"low": (UPPER, UPPER), "high": (LOWER, LOWER), "close": (UPPER, LOWER), "far": (LOWER, UPPER)},
    "FR": {"low": (LOWER, UPPER), "high": (UPPER, LOWER), "close": (LOWER, LOWER), "far": (UPPER, UPPER)},
    "BR": {"low": (LOWER, LOWER), "high": (UPPER, UPPER), "close": (LOWER, UPPER), "far": (UPPER, LOWER)},
}

# Channel 7 was calibrated against the table shifted by one entry: its
# "lower" is entry 13 (1400us) and its "upper" entry 14 (380us).
INDEX_OFFSET = {7: -1}


def limit_index(channel: int, bound: int) -> int:
    """Position in the flattened 24-entry limit table."""
    return 2 * channel + bound + INDEX_OFFSET.get(channel, 0)


def pose_indices(name: str) -> Tuple[int, ...]:
    """Limit-table entry used by every channel for the named pose."""
    if name not in POSE_NAMES:
        raise KeyError(f"unknown pose {name!r}, expected one of {POSE_NAMES}")

    out = [None] * SERVO_COUNT
    for leg in LEGS:
        out[leg.swing] = limit_index(leg.swing, SWING_BOUND[leg.name])
        first, second = LIFT_BOUNDS[leg.name][name]
        out[leg.lift[0]] = limit_index(leg.lift[0], first)
        out[leg.lift[1]] = limit_index(leg.lift[1], second)
    return tuple(out)


def build_poses(table=LIMIT_TABLE) -> Dict[str, Tuple[int, ...]]:
    if len(table) != 2 * SERVO_COUNT:
        raise ValueError(f"limit table needs {2 * SERVO_COUNT} entries, got {len(table)}")
    for ch in range(SERVO_COUNT):
        if table[2 * ch] > table[2 * ch + 1]:
            raise ValueError(f"channel {ch}: lower limit above upper limit")
    return {name: tuple(table[i] for i in pose_indices(name)) for name in POSE_NAMES}


POSES = build_poses()


def pose(name: str) -> Tuple[int, ...]:
    """Pulse vector (microseconds, channel order) for a named pose."""
    if name not in POSES:
        raise KeyError(f"unknown pose {name!r}, expected one of {POSE_NAMES}")
    return POSES[name]


# -------------------------------------------------
# Pose sanity check
# -------------------------------------------------

if __name__ == "__main__":
    print("[L2] Pose table")
    for n in POSE_NAMES:
        print(f"{n:6s} -> {' '.join(f'{p:5d}' for p in POSES[n])}")
