"""
Layer 1.4 - PCA9685 SERVO DRIVER
================================

Authoritative low-level driver for the PCA9685.

Responsibilities:
- Initialize the PCA9685 at 50 Hz (sleep -> prescale -> wake -> restart)
- Own the device context: bus, address, prescale, limit table
- Write OFF counters for a channel, reporting every register write
- Remember the last pulse commanded per channel

NON-RESPONSIBILITIES:
- No leg semantics
- No poses
- No interpolation
- No timing loops beyond the init sequence

This driver trusts Layer 0 for all electrical and mechanical truths.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from quadwalk.hardware.absolute_truths import (
    BUS,
    PCA_ADDR,
    MODE1,
    MODE2,
    PRESCALE,
    LED0_OFF_L,
    RESTART,
    SLEEP,
    ALLCALL,
    OUTDRV,
    RESOLUTION,
    SERVO_COUNT,
    CHANNEL_COUNT,
    CHANNEL_LIMITS,
)
from quadwalk.hardware.errors import PCAInitError, RegisterWriteError
from quadwalk.hardware.i2c_bus import open_i2c_bus, close_i2c_bus
from quadwalk.hardware.pacing import DEFAULT_PACING
from quadwalk.hardware.pulse import compute_prescale, counter_to_pulse

log = logging.getLogger(__name__)

WRITE_RETRIES = 3


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one register write (after retries)."""

    register: int
    value: int
    attempts: int
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PCA9685Device:
    """
    Device context for one PCA9685 on an open SMBus.

    Holds everything the old firmware kept in globals: the bus handle,
    the prescale it was configured with, the per-channel limit table and
    the last pulse written to each servo channel.

    Not thread safe. One caller at a time.
    """

    def __init__(
        self,
        bus,
        address=PCA_ADDR,
        limits=CHANNEL_LIMITS,
        prescale=None,
        write_retries=WRITE_RETRIES,
        pacing=DEFAULT_PACING,
        owns_bus=True,
    ):
        limits = tuple((int(lo), int(hi)) for lo, hi in limits)
        if len(limits) != SERVO_COUNT:
            raise ValueError(f"expected {SERVO_COUNT} channel limits, got {len(limits)}")
        for ch, (lo, hi) in enumerate(limits):
            if lo > hi:
                raise ValueError(f"channel {ch}: lower limit {lo} > upper limit {hi}")

        self.bus = bus
        self.address = address
        self.limits = limits
        self.prescale = compute_prescale() if prescale is None else prescale
        self.write_retries = max(0, int(write_retries))
        self.pacing = pacing
        self.positions: List[Optional[int]] = [None] * SERVO_COUNT
        self._owns_bus = owns_bus

    # --------------------------------------------------
    # Low-level helpers
    # --------------------------------------------------
    def write_register(self, reg, value, strict=False) -> WriteResult:
        """
        Write one byte, retrying transient OSErrors.

        Returns a WriteResult. With strict=True a write that failed on
        every attempt raises RegisterWriteError instead.
        """
        value &= 0xFF
        attempts = self.write_retries + 1
        error = None
        for attempt in range(1, attempts + 1):
            try:
                self.bus.write_byte_data(self.address, reg, value)
                return WriteResult(reg, value, attempt)
            except OSError as e:
                error = e
                log.debug("[PCA] Write reg=0x%02X attempt %d failed: %s", reg, attempt, e)
                if attempt < attempts:
                    self.pacing.retry()

        log.warning("[PCA] Write reg=0x%02X val=0x%02X failed after %d attempt(s): %s",
                    reg, value, attempts, error)
        if strict:
            raise RegisterWriteError(reg, value, attempts, error)
        return WriteResult(reg, value, attempts, error)

    def read_register(self, reg) -> int:
        attempts = self.write_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.bus.read_byte_data(self.address, reg)
            except OSError as e:
                log.debug("[PCA] Read reg=0x%02X attempt %d failed: %s", reg, attempt, e)
                if attempt == attempts:
                    raise
                self.pacing.retry()

    # --------------------------------------------------
    # Device init
    # --------------------------------------------------
    def configure(self, pacing=None):
        """
        Run the PCA9685 wake-up and frequency sequence.

        The prescale register only accepts writes while MODE1.SLEEP is
        set, so the chip is woken, put back to sleep for the prescale
        write, then restarted.
        """
        pacing = pacing or self.pacing
        log.info("[PCA] Mode: %d", self.read_register(MODE1))

        self.write_register(MODE2, OUTDRV, strict=True)     # totem pole outputs
        self.write_register(MODE1, ALLCALL, strict=True)    # respond to all-call
        pacing.oscillator()                                 # let oscillator catch up

        mode1 = self.read_register(MODE1) & ~SLEEP           # wake up
        self.write_register(MODE1, mode1, strict=True)
        pacing.oscillator()

        oldmode = self.read_register(MODE1)
        newmode = (oldmode & 0x7F) | SLEEP                   # restart bit off, sleep on
        self.write_register(MODE1, newmode, strict=True)
        self.write_register(PRESCALE, self.prescale, strict=True)
        self.write_register(MODE1, oldmode, strict=True)
        pacing.oscillator()
        self.write_register(MODE1, oldmode | RESTART, strict=True)

        log.info("[PCA] Configured at prescale %d", self.prescale)

    # --------------------------------------------------
    # PWM control
    # --------------------------------------------------
    def set_channel_off(self, channel, counter) -> List[WriteResult]:
        """
        Write the OFF counter of a channel (ON stays at 0).

        Low byte goes to 4*channel + 8, high byte to 4*channel + 9.
        """
        if not (0 <= channel < CHANNEL_COUNT):
            raise ValueError(f"Channel must be 0–{CHANNEL_COUNT - 1}")
        if not (0 <= counter < RESOLUTION):
            raise ValueError(f"Counter must be 0–{RESOLUTION - 1}, got {counter}")

        base = LED0_OFF_L + 4 * channel
        return [
            self.write_register(base, counter & 0xFF),       # OFF_L
            self.write_register(base + 1, counter >> 8),     # OFF_H
        ]

    def read_channel_pulse(self, channel) -> int:
        """
        Read a channel's OFF counter back and convert it to microseconds.
        """
        base = LED0_OFF_L + 4 * channel
        lo = self.read_register(base)
        hi = self.read_register(base + 1)
        return counter_to_pulse(((hi & 0x0F) << 8) | lo)

    def limits_for(self, channel):
        return self.limits[channel]

    # --------------------------------------------------
    # Cleanup
    # --------------------------------------------------
    def close(self):
        if self._owns_bus:
            close_i2c_bus(self.bus)
        self.bus = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def init_pca(
    bus_id=BUS,
    address=PCA_ADDR,
    pacing=DEFAULT_PACING,
    write_retries=WRITE_RETRIES,
    limits=CHANNEL_LIMITS,
    bus=None,
) -> PCA9685Device:
    """
    Open the bus, configure the PCA9685 for 50 Hz and return the device.

    Must be called once at startup, before any transition. Raises
    PCAInitError if the bus cannot be opened or the chip does not
    accept the setup sequence; nothing is returned in that case.
    A bus opened here is closed again on any failure, including a bad
    limit table.
    """
    owns_bus = bus is None
    if owns_bus:
        bus = open_i2c_bus(bus_id)

    try:
        device = PCA9685Device(
            bus,
            address=address,
            limits=limits,
            write_retries=write_retries,
            pacing=pacing,
            owns_bus=owns_bus,
        )
    except ValueError:
        if owns_bus:
            close_i2c_bus(bus)
        raise

    try:
        device.configure()
    except (OSError, RegisterWriteError) as e:
        log.error("[PCA] Initialization failed at 0x%02X: %s", address, e)
        device.close()
        raise PCAInitError(f"PCA9685 at 0x{address:02X} did not initialize: {e}") from e

    return device


# ---- Smoke test ----
if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    with init_pca() as dev:
        print(f"[PCA] Initialized, prescale={dev.prescale}")
