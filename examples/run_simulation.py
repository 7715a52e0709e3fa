#!/usr/bin/env python3
"""Example script to drive the simulated robot.

Headless mode holds a constant input for a fixed time and reports the final
pose; interactive mode opens a window driven with W/A/S/D and Q/E.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt
from loguru import logger
from drive_sim.config import SimulatorConfig, load_config
from drive_sim.core import wrap_to_two_pi
from drive_sim.input import ConstantController, KeyboardController
from drive_sim.simulation import TickScheduler
from drive_sim.visualization import FieldRenderer, parse_alliance, run_interactive


def main():
    """Main function."""
    parser = argparse.ArgumentParser(
        description='Drive a simulated holonomic robot on a 144" field'
    )
    parser.add_argument(
        '--scenario',
        type=str,
        default=None,
        help='Path to scenario configuration file (defaults built in)'
    )
    parser.add_argument(
        '--interactive',
        action='store_true',
        help='Open a window and drive with the keyboard'
    )
    parser.add_argument(
        '--backend',
        type=str,
        default='TkAgg',
        help='Matplotlib GUI backend for interactive mode'
    )
    parser.add_argument(
        '--duration',
        type=float,
        default=1.0,
        help='Simulated time for headless mode [s]'
    )
    parser.add_argument(
        '--input',
        type=float,
        nargs=3,
        default=[1.0, 0.0, 0.0],
        metavar=('AXIAL', 'LATERAL', 'YAW'),
        help='Constant normalized input for headless mode'
    )
    parser.add_argument(
        '--mode',
        type=str,
        default=None,
        choices=['robot_centric', 'field_centric'],
        help='Drive mode (overrides config)'
    )
    parser.add_argument(
        '--frame',
        type=str,
        default=None,
        help='Save the final headless frame to this image path'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level'
    )

    args = parser.parse_args()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=args.log_level
    )

    # Load configuration
    if args.scenario is not None:
        logger.info(f"Loading scenario from {args.scenario}")
        config = load_config(args.scenario)
    else:
        config = SimulatorConfig()

    if args.mode is not None:
        config.drive_mode = args.mode
        logger.info(f"Overriding drive mode to: {args.mode}")

    alliance = parse_alliance(config.alliance)

    if args.interactive:
        plt.switch_backend(args.backend)
        controller = KeyboardController()
        renderer = FieldRenderer(alliance=alliance, trail_length=config.trail_length)
        scheduler = TickScheduler.from_config(config, controller, renderer=renderer)
        run_interactive(scheduler)
        return

    controller = ConstantController(*args.input)
    renderer = None
    if args.frame is not None:
        renderer = FieldRenderer(alliance=alliance, trail_length=config.trail_length)
    scheduler = TickScheduler.from_config(config, controller, renderer=renderer)

    snapshot = scheduler.run(duration=args.duration)

    if renderer is not None:
        renderer.save_frame(args.frame)
        renderer.close()

    # Print summary
    pose = snapshot.pose
    logger.info("=" * 60)
    logger.info("RUN SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Ticks: {snapshot.tick} (t={snapshot.time:.3f}s)")
    logger.info(f"Final pose: x={pose.x:.2f}in, y={pose.y:.2f}in, "
                f"heading={wrap_to_two_pi(pose.heading):.3f}rad")
    logger.info(f"Final velocity: axial={snapshot.axial_vel:.2f}in/s, "
                f"lateral={snapshot.lateral_vel:.2f}in/s, yaw={snapshot.yaw_vel:.3f}rad/s")
    logger.info("=" * 60)
    logger.success("Run complete!")


if __name__ == '__main__':
    main()
