"""
Walk the robot.

    python -m quadwalk --cycles 3
    python -m quadwalk --cycles 0        # until Ctrl+C
"""

import argparse
import logging
import sys

from quadwalk.config import load_config
from quadwalk.hardware.errors import QuadwalkError
from quadwalk.hardware.pacing import PacingPolicy
from quadwalk.hardware.pca9685 import init_pca
from quadwalk.layer3.transition import Interpolation
from quadwalk.layer4.gait_cycle import walk
from quadwalk.logging_config import setup_logging

log = logging.getLogger("quadwalk")


def build_parser(cfg):
    parser = argparse.ArgumentParser(prog="quadwalk", description="Run the quadruped gait cycle.")
    parser.add_argument("--cycles", type=int, default=1,
                        help="gait cycles to run, 0 walks until Ctrl+C (default: 1)")
    parser.add_argument("--steps", type=int, default=cfg.steps,
                        help=f"interpolation steps per transition (default: {cfg.steps})")
    parser.add_argument("--interpolation", choices=[m.value for m in Interpolation],
                        default=cfg.interpolation)
    parser.add_argument("--bus", type=int, default=cfg.i2c_bus,
                        help=f"I2C bus number (default: {cfg.i2c_bus})")
    parser.add_argument("--log-level", default=cfg.log_level)
    return parser


def main(argv=None):
    cfg = load_config()
    args = build_parser(cfg).parse_args(argv)
    setup_logging(args.log_level, cfg.log_file)

    if args.steps < 1:
        log.error("[MAIN] --steps must be >= 1")
        return 2
    if args.cycles < 0:
        log.error("[MAIN] --cycles must be >= 0")
        return 2

    pacing = PacingPolicy(
        write_delay_us=cfg.write_delay_us,
        settle_delay_us=cfg.settle_delay_us,
        retry_delay_us=cfg.retry_delay_us,
    )

    try:
        device = init_pca(
            bus_id=args.bus,
            address=cfg.address,
            pacing=pacing,
            write_retries=cfg.write_retries,
        )
    except QuadwalkError as e:
        log.error("[MAIN] %s", e)
        return 1

    try:
        with device:
            done = walk(
                device,
                cycles=args.cycles or None,
                steps=args.steps,
                pacing=pacing,
                mode=Interpolation(args.interpolation),
                abort_on_write_failure=cfg.abort_on_write_failure,
            )
            log.info("[MAIN] Finished %d cycle(s)", done)
    except KeyboardInterrupt:
        log.info("[MAIN] Stopped cleanly")
    except QuadwalkError as e:
        log.error("[MAIN] %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
