"""
Layer 1.0 - FAILURE TYPES
=========================

Every failure this package raises on purpose derives from QuadwalkError.

- PCAInitError      : bus could not be opened or the chip refused setup
- RegisterWriteError: a register write failed on every retry
- PulseLimitError   : a pulse would drive a servo past its mechanical range
- TransitionAborted : a transition stopped part way (carries the partial report)
"""


class QuadwalkError(Exception):
    pass


class PCAInitError(QuadwalkError):
    pass


class RegisterWriteError(QuadwalkError):
    def __init__(self, register, value, attempts, cause=None):
        self.register = register
        self.value = value
        self.attempts = attempts
        self.cause = cause
        super().__init__(
            f"I2C write failed at reg 0x{register:02X} "
            f"(value 0x{value:02X}) after {attempts} attempt(s): {cause}"
        )


class PulseLimitError(QuadwalkError):
    def __init__(self, channel, pulse_us, lower, upper):
        self.channel = channel
        self.pulse_us = pulse_us
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"channel {channel}: pulse {pulse_us}us outside [{lower}, {upper}]us"
        )


class TransitionAborted(QuadwalkError):
    def __init__(self, report, cause):
        self.report = report
        self.cause = cause
        super().__init__(f"transition aborted: {cause}")
