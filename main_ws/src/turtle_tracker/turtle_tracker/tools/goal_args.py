"""Command line parsing for the tracking client, kept free of rclpy."""
import argparse

from turtle_tracker.errors import InvalidGoal
from turtle_tracker.tracking_types import Goal


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a goal pose to the turtle tracking server")
    parser.add_argument("x", type=float, help="Target x coordinate")
    parser.add_argument("y", type=float, help="Target y coordinate")
    parser.add_argument("theta", type=float, help="Target heading (rad)")
    parser.add_argument("speed", type=float, help="Cruise speed (> 0)")
    parser.add_argument("--cancel-after", type=float, default=None,
                        help="Cancel the goal after this many seconds")
    parser.add_argument("--server-timeout", type=float, default=5.0,
                        help="Seconds to wait for the action server (default: 5.0)")
    return parser

#--------------------------------------------------------------------------------
def parse_goal(argv=None) -> tuple:
    """Parse command line arguments into (Goal, args). Exits on bad input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        goal = Goal(
            target_x=args.x,
            target_y=args.y,
            target_heading=args.theta,
            cruise_speed=args.speed,
        )
    except InvalidGoal as e:
        parser.error(str(e))
    return goal, args
