"""
Layer 1.1 - PULSE CONVERSION
============================

Microseconds <-> PCA9685 counter units (one of RESOLUTION ticks per period).

Both directions truncate toward zero, like integer division on the chip
side, so a round trip is only approximate:

    pulse_to_counter(1500)  -> 307
    counter_to_pulse(307)   -> 1499

No hardware I/O here.
"""

from quadwalk.hardware.absolute_truths import (
    OSC_CLK,
    RESOLUTION,
    FREQ,
    MICROSEC_PER_SEC,
)


def trunc_div(num: int, den: int) -> int:
    """Integer division truncating toward zero (Python's // floors)."""
    q = abs(num) // abs(den)
    return q if (num < 0) == (den < 0) else -q


def pulse_to_counter(pulse_us: int) -> int:
    return trunc_div(int(pulse_us) * RESOLUTION * FREQ, MICROSEC_PER_SEC)


def counter_to_pulse(counter: int) -> int:
    return trunc_div(int(counter) * MICROSEC_PER_SEC, RESOLUTION * FREQ)


def compute_prescale(osc_clk=OSC_CLK, resolution=RESOLUTION, freq=FREQ) -> int:
    """
    Prescale register value for the wanted refresh frequency.

    25 MHz / (4096 * 50) = 122.07, minus 0.5, truncated -> 121
    """
    return int(osc_clk / (resolution * freq) - 0.5)
