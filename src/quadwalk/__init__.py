"""quadwalk - PCA9685 servo control for a 12-servo walking quadruped."""

__version__ = "0.1.0"
