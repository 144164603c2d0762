import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from robot_common.geometry import wrap_to_pi

from turtle_tracker.errors import InvalidGoal


class TrackerState(int, Enum):
    IDLE = 0
    TRACKING = 1
    SUCCEEDED = 2
    CANCELLED = 3
    ABORTED = 4


TERMINAL_STATES = {
    TrackerState.SUCCEEDED,
    TrackerState.CANCELLED,
    TrackerState.ABORTED,
}


# Values match the outcome field of TrackGoal.Result
class OutcomeKind(int, Enum):
    SUCCEEDED = 0
    CANCELLED = 1
    ABORTED = 2


class AbortReason(str, Enum):
    NO_POSE_AVAILABLE = "no pose available"
    SHUTDOWN = "server shutting down"
    EXTERNAL = "aborted externally"


@dataclass(frozen=True)
class Pose2D:
    x: float
    y: float
    heading: float = 0.0

    def __post_init__(self):
        # Heading is always kept in (-pi, pi]
        object.__setattr__(self, "heading", wrap_to_pi(float(self.heading)))


@dataclass(frozen=True)
class Goal:
    target_x: float
    target_y: float
    target_heading: float
    cruise_speed: float

    def __post_init__(self):
        values = (self.target_x, self.target_y, self.target_heading, self.cruise_speed)
        if not all(math.isfinite(v) for v in values):
            raise InvalidGoal(f"Goal fields must be finite, got {values}")
        if self.cruise_speed <= 0.0:
            raise InvalidGoal(f"Cruise speed must be > 0, got {self.cruise_speed}")


@dataclass(frozen=True)
class VelocityCommand:
    linear: float = 0.0
    angular: float = 0.0

    @classmethod
    def zero(cls) -> "VelocityCommand":
        return cls(0.0, 0.0)

    def is_zero(self) -> bool:
        return self.linear == 0.0 and self.angular == 0.0


@dataclass(frozen=True)
class Feedback:
    pose: Pose2D
    distance_remaining: float


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    final_distance: Optional[float] = None
    reason: Optional[AbortReason] = None

    @classmethod
    def succeeded(cls, final_distance: float) -> "Outcome":
        return cls(OutcomeKind.SUCCEEDED, final_distance=final_distance)

    @classmethod
    def cancelled(cls) -> "Outcome":
        return cls(OutcomeKind.CANCELLED)

    @classmethod
    def aborted(cls, reason: AbortReason) -> "Outcome":
        return cls(OutcomeKind.ABORTED, reason=reason)


@dataclass(frozen=True)
class TickResult:
    """Output of one control step."""
    command: VelocityCommand = field(default_factory=VelocityCommand.zero)
    feedback: Optional[Feedback] = None
    outcome: Optional[Outcome] = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None
