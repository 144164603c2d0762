"""
Open loop motion patterns for the pattern publisher.

circle, square and spiral are pure functions of the tick index; the random
walk keeps the command it is currently holding.
"""
import math
from typing import Callable, Optional

import numpy as np

from turtle_tracker.config.tracker_configs import PatternConfig
from turtle_tracker.tracking_types import VelocityCommand


def circle_command(tick: int, cfg: PatternConfig) -> VelocityCommand:
    return VelocityCommand(linear=cfg.linear_speed, angular=cfg.angular_speed)

#--------------------------------------------------------------------------------
def square_command(tick: int, cfg: PatternConfig) -> VelocityCommand:
    """Drive one side, then turn a quarter revolution in place, repeat."""
    cycle = cfg.square_side_ticks + cfg.square_turn_ticks
    phase = tick % cycle
    if phase < cfg.square_side_ticks:
        return VelocityCommand(linear=cfg.linear_speed, angular=0.0)

    # Spread the 90 degree turn evenly over the turn ticks
    turn_rate = (math.pi / 2.0) / (cfg.square_turn_ticks * cfg.period)
    return VelocityCommand(linear=0.0, angular=turn_rate)

#--------------------------------------------------------------------------------
def spiral_command(tick: int, cfg: PatternConfig) -> VelocityCommand:
    linear = min(cfg.linear_speed + tick * cfg.spiral_increment, cfg.spiral_max_linear)
    return VelocityCommand(linear=linear, angular=cfg.angular_speed)


class RandomWalk:
    def __init__(self, cfg: PatternConfig, seed: Optional[int] = None):
        """
        Picks a new random command every cfg.random_hold_ticks ticks and
        repeats it in between.
        """
        if cfg.random_hold_ticks < 1:
            raise ValueError(f"random_hold_ticks must be >= 1, got {cfg.random_hold_ticks}")
        self._cfg = cfg
        self._rng = np.random.default_rng(seed)
        self.last_command: Optional[VelocityCommand] = None

    #--------------------------------------------------------------------------------
    def __call__(self, tick: int, cfg: PatternConfig) -> VelocityCommand:
        if self.last_command is None or tick % self._cfg.random_hold_ticks == 0:
            self.last_command = self._pick()
        return self.last_command

    #--------------------------------------------------------------------------------
    def _pick(self) -> VelocityCommand:
        linear = float(self._rng.uniform(0.0, self._cfg.random_max_linear))
        angular = float(self._rng.uniform(-self._cfg.random_max_angular, self._cfg.random_max_angular))
        return VelocityCommand(linear=linear, angular=angular)


PATTERN_NAMES = ("circle", "square", "spiral", "random")


class MotionPattern:
    def __init__(self, name: str, cfg: PatternConfig = PatternConfig(), seed: Optional[int] = None):
        self.name = name
        self._cfg = cfg
        self._tick = 0
        self._step: Callable[[int, PatternConfig], VelocityCommand] = self._select(name, seed)

    #--------------------------------------------------------------------------------
    def _select(self, name: str, seed: Optional[int]):
        if name == "circle":
            return circle_command
        if name == "square":
            return square_command
        if name == "spiral":
            return spiral_command
        if name == "random":
            return RandomWalk(self._cfg, seed)
        raise ValueError(f"Unknown pattern '{name}', expected one of {', '.join(PATTERN_NAMES)}")

    #--------------------------------------------------------------------------------
    @property
    def tick_count(self) -> int:
        return self._tick

    #--------------------------------------------------------------------------------
    def next_command(self) -> VelocityCommand:
        cmd = self._step(self._tick, self._cfg)
        self._tick += 1
        return cmd
