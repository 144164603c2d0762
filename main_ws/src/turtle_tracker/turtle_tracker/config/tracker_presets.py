""" Presets for tracker and pattern configurations. """

from turtle_tracker.config.tracker_configs import (
    PatternConfig,
    TrackerConfig,
    Workspace,
)

# Visible turtlesim window, turtles are clamped to this square
TURTLESIM_WORKSPACE = Workspace(
    min_x=0.0,
    max_x=11.08889,
    min_y=0.0,
    max_y=11.08889,
)

TURTLESIM_TRACKER = TrackerConfig(
    pose_timeout=5.0,
    workspace=TURTLESIM_WORKSPACE,
    max_angular=4.0,
)

DEFAULT_PATTERNS = PatternConfig()
