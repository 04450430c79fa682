# absolute_truths.py
# ==================================================
# Electrical & mechanical truths (read-only constants)
# - PCA9685 registers, bits and timing for 50 Hz servo output
# - I2C address and bus number
# - Per-channel pulse limits (microseconds) for the 12 leg servos
#
# If anything here is wrong the physical robot is wrong.
# Keep this file free of logic and math beyond simple constants.
# ==================================================

# --- I2C / hardware ---
BUS = 1                # Raspberry Pi I2C bus the PCA9685 hangs off
PCA_ADDR = 0x40        # PCA9685 default I2C address

# PCA9685 registers (hardware truth)
MODE1      = 0x00
MODE2      = 0x01
LED0_OFF_L = 0x08      # channel n OFF_L = LED0_OFF_L + 4 * n, OFF_H one above
PRESCALE   = 0xFE

# MODE1 / MODE2 bits
RESTART = 0x80         # MODE1 bit 7
SLEEP   = 0x10         # MODE1 bit 4
ALLCALL = 0x01         # MODE1 bit 0
OUTDRV  = 0x04         # MODE2 bit 2 (totem pole outputs)

# --- Timing truths ---
OSC_CLK          = 25_000_000   # internal oscillator, Hz
RESOLUTION       = 4096         # 12-bit counter
FREQ             = 50           # servo refresh, Hz
MICROSEC_PER_SEC = 1_000_000

# --- Default delays (microseconds) ---
OSCILLATOR_DELAY_US = 5_000       # after mode changes
WRITE_DELAY_US      = 2_000       # after every channel write
SETTLE_DELAY_US     = 5_000_000   # between gait transitions
RETRY_DELAY_US      = 5_000       # before retrying a failed register access

# --- Robot shape ---
SERVO_COUNT = 12
CHANNEL_COUNT = 16

# --- Servo pulse limits (lower, upper) in microseconds ---
# Flattened this is the 24-entry calibration table: entry 2*ch is the
# lower bound of channel ch, entry 2*ch + 1 the upper bound.
CHANNEL_LIMITS = (
    (380, 1700),   # 0  FL swing
    (380, 1500),   # 1  FL lift
    (380, 1500),   # 2  FL lift
    (380, 1700),   # 3  BL swing
    (380, 1400),   # 4  BL lift
    (500, 1500),   # 5  BL lift
    (380, 1400),   # 6  FR swing
    (380, 1500),   # 7  FR lift
    (550, 1650),   # 8  FR lift
    (380, 1900),   # 9  BR swing
    (650, 1500),   # 10 BR lift
    (1000, 2100),  # 11 BR lift
)

LIMIT_TABLE = tuple(v for pair in CHANNEL_LIMITS for v in pair)

# That's it - pure facts only.
