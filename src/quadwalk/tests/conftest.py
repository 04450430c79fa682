import pytest

from quadwalk.hardware.absolute_truths import LED0_OFF_L
from quadwalk.hardware.pacing import NO_WAIT
from quadwalk.hardware.pca9685 import PCA9685Device

ALWAYS = -1


class FakeSMBus:
    """
    Stand-in for smbus2.SMBus.

    Records every successful write, answers reads from a register map
    (written values are read back), and can fail writes to chosen
    registers with OSError 121 like a flaky bus.
    """

    def __init__(self, registers=None):
        self.registers = dict(registers or {})
        self.writes = []
        self.fail = {}
        self.closed = False

    def fail_register(self, reg, times=ALWAYS):
        self.fail[reg] = times

    def write_byte_data(self, addr, reg, value):
        remaining = self.fail.get(reg, 0)
        if remaining:
            if remaining > 0:
                self.fail[reg] = remaining - 1
            raise OSError(121, "Remote I/O error")
        self.writes.append((addr, reg, value))
        self.registers[reg] = value

    def read_byte_data(self, addr, reg):
        return self.registers.get(reg, 0)

    def close(self):
        self.closed = True

    # -- helpers for assertions --
    def register_writes(self):
        return [(reg, value) for _, reg, value in self.writes]

    def channel_counters(self, channel):
        """Counter values written to a channel's OFF registers, in order."""
        base = LED0_OFF_L + 4 * channel
        out = []
        lo = None
        for _, reg, value in self.writes:
            if reg == base:
                lo = value
            elif reg == base + 1 and lo is not None:
                out.append((value << 8) | lo)
                lo = None
        return out


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture()
def fake_bus():
    return FakeSMBus()


@pytest.fixture()
def device(fake_bus):
    return PCA9685Device(fake_bus, pacing=NO_WAIT)


@pytest.fixture()
def wide_device(fake_bus):
    """Device whose limits accept any pulse the chip can produce."""
    return PCA9685Device(fake_bus, limits=[(0, 4000)] * 12, pacing=NO_WAIT)


@pytest.fixture()
def sleeps():
    return SleepRecorder()
