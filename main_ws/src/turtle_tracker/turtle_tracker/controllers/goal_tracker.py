import math
import threading
from typing import Optional, Protocol

from robot_common.geometry import clamp, euclidean, heading_to, wrap_to_pi
from robot_common.logging import LogEvent, log_info, log_warn

from turtle_tracker.adapters.pose_cache import PoseSource
from turtle_tracker.config.tracker_configs import TrackerConfig
from turtle_tracker.errors import AlreadyActive, GoalOutOfBounds
from turtle_tracker.tracking_types import (
    TERMINAL_STATES,
    AbortReason,
    Feedback,
    Goal,
    Outcome,
    OutcomeKind,
    Pose2D,
    TickResult,
    TrackerState,
    VelocityCommand,
)


class VelocitySink(Protocol):
    def publish(self, cmd: VelocityCommand) -> None:
        ...


_TERMINAL_STATE_FOR = {
    OutcomeKind.SUCCEEDED: TrackerState.SUCCEEDED,
    OutcomeKind.CANCELLED: TrackerState.CANCELLED,
    OutcomeKind.ABORTED: TrackerState.ABORTED,
}


class GoalTracker:
    """
    Drives a body towards a single goal pose, one control tick at a time.

    Each tick reads the latest pose, produces a velocity command (also sent to
    the velocity sink), optionally a throttled feedback sample, and on the last
    step the outcome. The final command of every session is the zero command.

    cancel() and abort() may be called from other threads; they only raise a
    flag that the next tick consumes.
    """

    def __init__(
        self,
        pose_source: Optional[PoseSource] = None,
        velocity_sink: Optional[VelocitySink] = None,
        config: TrackerConfig = TrackerConfig(),
        logger=None,
    ):
        self._pose_source = pose_source
        self._velocity_sink = velocity_sink
        self._config = config
        self._logger = logger
        self._last_log_event: Optional[LogEvent] = None

        self._lock = threading.Lock()
        self._state = TrackerState.IDLE
        self._goal: Optional[Goal] = None
        self._started_at: Optional[float] = None
        self._last_feedback_at: Optional[float] = None
        self._seen_pose = False
        self._cancel_requested = False
        self._abort_reason: Optional[AbortReason] = None
        self._last_outcome: Optional[Outcome] = None

    #--------------------------------------------------------------------------------
    @property
    def config(self) -> TrackerConfig:
        return self._config

    #--------------------------------------------------------------------------------
    @property
    def state(self) -> TrackerState:
        with self._lock:
            return self._state

    #--------------------------------------------------------------------------------
    @property
    def goal(self) -> Optional[Goal]:
        return self._goal

    #--------------------------------------------------------------------------------
    @property
    def last_outcome(self) -> Optional[Outcome]:
        return self._last_outcome

    #--------------------------------------------------------------------------------
    def is_active(self) -> bool:
        return self.state == TrackerState.TRACKING

    #--------------------------------------------------------------------------------
    def validate(self, goal: Goal):
        """Raises GoalOutOfBounds if a workspace is configured and the goal is outside it."""
        workspace = self._config.workspace
        if workspace is not None and not workspace.contains(goal.target_x, goal.target_y):
            raise GoalOutOfBounds(goal.target_x, goal.target_y, workspace)

    #--------------------------------------------------------------------------------
    def start(self, goal: Goal, now: Optional[float] = None) -> bool:
        """
        Accept a goal and begin tracking it.

        Args:
            goal: the destination pose and cruise speed
            now: start time, used for the first pose timeout. When omitted the
                timeout counts from the first tick.
        Returns:
            True if a pose was already available when the goal was accepted.
        Raises:
            AlreadyActive: another goal is being tracked (it is left untouched)
            GoalOutOfBounds: the goal lies outside the configured workspace
        """
        with self._lock:
            if self._state == TrackerState.TRACKING:
                raise AlreadyActive("A goal is already being tracked")
            self.validate(goal)

            self._state = TrackerState.TRACKING
            self._goal = goal
            self._started_at = now
            self._last_feedback_at = None
            self._seen_pose = False
            self._cancel_requested = False
            self._abort_reason = None
            self._last_outcome = None

        initial_pose_available = self._read_pose(None) is not None
        self._log(
            f"Tracking goal x={goal.target_x:.2f} y={goal.target_y:.2f} "
            f"heading={goal.target_heading:.2f} speed={goal.cruise_speed:.2f}"
        )
        if not initial_pose_available:
            self._log("No pose received yet, holding still until one arrives", warn=True)
        return initial_pose_available

    #--------------------------------------------------------------------------------
    def cancel(self):
        """Request cancellation. No-op unless a goal is being tracked."""
        with self._lock:
            if self._state == TrackerState.TRACKING:
                self._cancel_requested = True

    #--------------------------------------------------------------------------------
    def abort(self, reason: AbortReason = AbortReason.EXTERNAL):
        """Request an abort with the given reason. No-op unless tracking."""
        with self._lock:
            if self._state == TrackerState.TRACKING and self._abort_reason is None:
                self._abort_reason = reason

    #--------------------------------------------------------------------------------
    def reset(self) -> bool:
        """
        Return a finished tracker to IDLE.

        Returns:
            False if a newer goal is already being tracked, in which case the
            tracker is left alone and the caller must not stop the body.
        """
        with self._lock:
            if self._state in TERMINAL_STATES:
                self._state = TrackerState.IDLE
                self._goal = None
            return self._state != TrackerState.TRACKING

    #--------------------------------------------------------------------------------
    def tick(self, current_pose: Optional[Pose2D], now: float) -> Optional[TickResult]:
        """
        Run one control step.

        Args:
            current_pose: latest pose, or None to read it from the pose source
            now: current time in seconds (simulated or wall clock)
        Returns:
            TickResult while tracking, None if there is no goal to track.
        """
        with self._lock:
            if self._state != TrackerState.TRACKING:
                return None
            if self._started_at is None:
                self._started_at = now
            cancel_requested = self._cancel_requested
            abort_reason = self._abort_reason
            goal = self._goal

        # Cancellation wins over everything else
        if cancel_requested:
            return self._finish(Outcome.cancelled())

        if abort_reason is not None:
            return self._finish(Outcome.aborted(abort_reason))

        pose = self._read_pose(current_pose)
        if pose is None:
            if self._seen_pose:
                # Dropped sample mid-session: hold still, no timeout
                self._log("Pose sample missing, holding still", warn=True)
                return self._emit(TickResult())
            timeout = self._config.pose_timeout
            if timeout is not None and (now - self._started_at) >= timeout:
                return self._finish(Outcome.aborted(AbortReason.NO_POSE_AVAILABLE))
            self._log("Waiting for first pose...", warn=True)
            return self._emit(TickResult())

        if not self._seen_pose:
            self._seen_pose = True
            self._log(f"First pose x={pose.x:.2f} y={pose.y:.2f} heading={pose.heading:.2f}")

        dx = goal.target_x - pose.x
        dy = goal.target_y - pose.y
        distance = euclidean(dx, dy)

        if distance > self._config.distance_tolerance:
            # Drive: slow down near the goal, steer towards it
            heading_error = wrap_to_pi(heading_to(pose.x, pose.y, goal.target_x, goal.target_y) - pose.heading)
            linear = min(goal.cruise_speed, distance)
            angular = self._config.kp_turn * heading_error
        else:
            # In position: rotate in place to the requested heading
            final_heading_error = wrap_to_pi(goal.target_heading - pose.heading)
            if abs(final_heading_error) <= self._config.angle_tolerance:
                return self._finish(Outcome.succeeded(distance))
            linear = 0.0
            angular = self._config.kp_align * final_heading_error

        command = self._limit(linear, angular)
        feedback = None
        if self._feedback_due(now):
            self._last_feedback_at = now
            feedback = Feedback(pose=pose, distance_remaining=distance)

        return self._emit(TickResult(command=command, feedback=feedback))

    #--------------------------------------------------------------------------------
    def stop_command(self) -> VelocityCommand:
        return VelocityCommand.zero()

    #--------------------------------------------------------------------------------
    def _read_pose(self, current_pose: Optional[Pose2D]) -> Optional[Pose2D]:
        if current_pose is not None:
            return current_pose
        if self._pose_source is None:
            return None
        return self._pose_source.latest()

    #--------------------------------------------------------------------------------
    def _feedback_due(self, now: float) -> bool:
        if self._last_feedback_at is None:
            return True
        return (now - self._last_feedback_at) >= self._config.feedback_period

    #--------------------------------------------------------------------------------
    def _limit(self, linear: float, angular: float) -> VelocityCommand:
        if self._config.max_linear is not None:
            linear = clamp(linear, -self._config.max_linear, self._config.max_linear)
        if self._config.max_angular is not None:
            angular = clamp(angular, -self._config.max_angular, self._config.max_angular)
        return VelocityCommand(linear=linear, angular=angular)

    #--------------------------------------------------------------------------------
    def _finish(self, outcome: Outcome) -> TickResult:
        with self._lock:
            self._state = _TERMINAL_STATE_FOR[outcome.kind]
            self._last_outcome = outcome
            self._cancel_requested = False
            self._abort_reason = None

        if outcome.kind == OutcomeKind.SUCCEEDED:
            self._log(f"Goal reached, final distance {outcome.final_distance:.3f}")
        elif outcome.kind == OutcomeKind.CANCELLED:
            self._log("Goal cancelled")
        else:
            self._log(f"Goal aborted: {outcome.reason.value}", warn=True)

        return self._emit(TickResult(command=self.stop_command(), outcome=outcome))

    #--------------------------------------------------------------------------------
    def _emit(self, result: TickResult) -> TickResult:
        if self._velocity_sink is not None:
            self._velocity_sink.publish(result.command)
        return result

    #--------------------------------------------------------------------------------
    def _log(self, message: str, warn: bool = False):
        if self._logger is None:
            return
        log = log_warn if warn else log_info
        self._last_log_event = log(
            self._logger,
            message,
            self.__class__.__name__,
            self._last_log_event,
        )


#--------------------------------------------------------------------------------
def distance_to_goal(pose: Pose2D, goal: Goal) -> float:
    return math.hypot(goal.target_x - pose.x, goal.target_y - pose.y)
