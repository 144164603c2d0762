# turtle_tracker/config/tracker_configs.py

from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Workspace:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass(frozen=True)
class TrackerConfig:
    distance_tolerance: float = 0.1     # length units
    angle_tolerance: float = 0.05       # rad
    kp_turn: float = 2.0                # steering gain while driving
    kp_align: float = 1.5               # gain for final heading alignment
    feedback_period: float = 0.5        # s, minimum spacing between feedback messages
    control_period: float = 0.05        # s, 20 Hz control loop
    pose_timeout: Optional[float] = None    # s, None waits forever for the first pose
    workspace: Optional[Workspace] = None   # None disables bounds checks
    max_linear: Optional[float] = None
    max_angular: Optional[float] = None


@dataclass(frozen=True)
class PatternConfig:
    period: float = 0.5                 # s between published commands
    linear_speed: float = 2.0
    angular_speed: float = 1.0
    square_side_ticks: int = 4          # ticks driving along one side
    square_turn_ticks: int = 2          # ticks turning at a corner
    spiral_increment: float = 0.1       # linear speed added each tick
    spiral_max_linear: float = 4.0
    random_hold_ticks: int = 5          # ticks to hold one random command
    random_max_linear: float = 2.0
    random_max_angular: float = 2.0
