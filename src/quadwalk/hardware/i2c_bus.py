"""
Layer 1.2 - I2C BUS OWNER
=========================

Opens and closes the SMBus used by a PCA9685 device context.

Responsibilities:
- Open the I2C bus number given (default from absolute_truths.py)
- Turn "bus missing / permission denied" into a typed init failure
- Close the bus on shutdown

NON-RESPONSIBILITIES (forbidden here):
- No PCA9685 logic
- No retries, filters, or control policy
- No robot semantics

If something breaks here, the failure is electrical, not logical.
"""

import logging

from smbus2 import SMBus

from quadwalk.hardware.absolute_truths import BUS
from quadwalk.hardware.errors import PCAInitError

log = logging.getLogger(__name__)


def open_i2c_bus(bus_id=BUS):
    """
    Open /dev/i2c-<bus_id> and return the SMBus instance.

    The open is never retried: a missing bus is a wiring or OS problem.
    """
    try:
        bus = SMBus(bus_id)
    except OSError as e:
        log.error("[I2C] Could not open bus %s: %s", bus_id, e)
        raise PCAInitError(f"Unable to open I2C bus {bus_id}: {e}") from e
    log.info("[I2C] Opened bus %s", bus_id)
    return bus


def close_i2c_bus(bus):
    """
    Close a bus opened by open_i2c_bus. Safe to call twice.
    """
    if bus is None:
        return
    try:
        bus.close()
    except OSError as e:
        log.warning("[I2C] Error while closing bus: %s", e)
    else:
        log.info("[I2C] Closed bus")
