import math

import pytest

from turtle_tracker.adapters.pose_cache import LatestPoseCache
from turtle_tracker.config.tracker_configs import TrackerConfig
from turtle_tracker.config.tracker_presets import TURTLESIM_WORKSPACE
from turtle_tracker.controllers.goal_tracker import GoalTracker
from turtle_tracker.errors import AlreadyActive, GoalOutOfBounds, InvalidGoal
from turtle_tracker.tracking_types import (
    AbortReason,
    Goal,
    OutcomeKind,
    Pose2D,
    TrackerState,
)


class RecordingSink:
    def __init__(self):
        self.commands = []

    def publish(self, cmd):
        self.commands.append(cmd)


class ScriptedPoseSource:
    """Returns the queued samples in order, then keeps repeating the last one."""
    def __init__(self, samples):
        self._samples = list(samples)

    def latest(self):
        if len(self._samples) > 1:
            return self._samples.pop(0)
        return self._samples[0]


def make_tracker(config=TrackerConfig(), source=None):
    sink = RecordingSink()
    return GoalTracker(pose_source=source, velocity_sink=sink, config=config), sink


def test_drives_straight_at_cruise_speed():
    tracker, sink = make_tracker()
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)

    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    assert result.command.linear == pytest.approx(1.0)
    assert result.command.angular == pytest.approx(0.0)
    assert result.outcome is None
    assert not result.is_terminal
    assert result.feedback.distance_remaining == pytest.approx(10.0)
    assert sink.commands == [result.command]

def test_turns_proportionally_towards_target():
    tracker, _ = make_tracker()
    tracker.start(Goal(0.0, 10.0, 0.0, 1.0), now=0.0)

    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    assert result.command.angular == pytest.approx(math.pi)
    assert result.command.linear == pytest.approx(1.0)

def test_linear_speed_capped_by_distance():
    tracker, _ = make_tracker()
    tracker.start(Goal(0.5, 0.0, 0.0, 2.0), now=0.0)

    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    assert result.command.linear == pytest.approx(0.5)

def test_angular_clamp_applied_when_configured():
    tracker, _ = make_tracker(TrackerConfig(max_angular=1.0))
    tracker.start(Goal(0.0, 10.0, 0.0, 1.0), now=0.0)

    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    assert result.command.angular == pytest.approx(1.0)

def test_succeeds_immediately_when_already_at_goal():
    for pose in (Pose2D(3.0, 4.0, 0.2), Pose2D(3.05, 4.0, 0.23)):
        tracker, sink = make_tracker()
        tracker.start(Goal(3.0, 4.0, 0.2, 1.0), now=0.0)

        result = tracker.tick(pose, 0.0)

        assert result.outcome.kind == OutcomeKind.SUCCEEDED
        assert result.is_terminal
        assert result.outcome.final_distance == pytest.approx(0.0, abs=0.1)
        assert result.command.is_zero()
        assert result.feedback is None
        assert tracker.state == TrackerState.SUCCEEDED
        assert sink.commands[-1].is_zero()

def test_aligns_heading_in_place():
    tracker, _ = make_tracker()
    tracker.start(Goal(1.0, 1.0, 1.0, 1.0), now=0.0)

    result = tracker.tick(Pose2D(1.0, 1.0, 0.0), 0.0)

    assert result.outcome is None
    assert result.command.linear == 0.0
    assert result.command.angular == pytest.approx(1.5)

def test_alignment_takes_the_short_way_round():
    tracker, _ = make_tracker()
    tracker.start(Goal(1.0, 1.0, 3.0, 1.0), now=0.0)

    result = tracker.tick(Pose2D(1.0, 1.0, -3.0), 0.0)

    expected_error = 6.0 - 2.0 * math.pi
    assert result.command.angular == pytest.approx(1.5 * expected_error)

def test_cancel_yields_single_cancelled_outcome():
    tracker, sink = make_tracker()
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    tracker.cancel()
    result = tracker.tick(Pose2D(0.5, 0.0, 0.0), 0.05)

    assert result.outcome.kind == OutcomeKind.CANCELLED
    assert result.command.is_zero()
    assert result.feedback is None
    assert tracker.state == TrackerState.CANCELLED
    assert sink.commands[-1].is_zero()

    # Second cancel is a no-op and nothing else is produced
    tracker.cancel()
    assert tracker.tick(Pose2D(0.5, 0.0, 0.0), 0.1) is None
    assert tracker.state == TrackerState.CANCELLED
    assert len(sink.commands) == 2

def test_cancel_when_idle_does_not_affect_next_goal():
    tracker, _ = make_tracker()
    tracker.cancel()
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)

    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    assert result.outcome is None

def test_start_while_tracking_fails_and_keeps_original_goal():
    tracker, _ = make_tracker()
    original = Goal(10.0, 0.0, 0.0, 1.0)
    tracker.start(original, now=0.0)

    with pytest.raises(AlreadyActive):
        tracker.start(Goal(0.0, 10.0, 0.0, 1.0), now=0.0)

    assert tracker.goal == original
    assert tracker.state == TrackerState.TRACKING
    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)
    assert result.command.angular == pytest.approx(0.0)

def test_new_goal_accepted_after_terminal_state():
    tracker, _ = make_tracker()
    tracker.start(Goal(0.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)
    assert tracker.state == TrackerState.SUCCEEDED

    tracker.start(Goal(5.0, 0.0, 0.0, 1.0), now=1.0)
    assert tracker.state == TrackerState.TRACKING
    assert tracker.last_outcome is None

def test_reset_returns_terminal_tracker_to_idle():
    tracker, _ = make_tracker()
    tracker.start(Goal(0.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    assert tracker.reset()

    assert tracker.state == TrackerState.IDLE
    assert tracker.goal is None
    assert tracker.last_outcome.kind == OutcomeKind.SUCCEEDED

def test_reset_leaves_newly_started_goal_tracking():
    tracker, sink = make_tracker()
    tracker.start(Goal(0.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)
    # A second goal is accepted before the first session cleans up
    tracker.start(Goal(5.0, 0.0, 0.0, 1.0), now=0.1)
    driving = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.1)

    assert tracker.reset() is False
    assert tracker.is_active()
    assert tracker.goal == Goal(5.0, 0.0, 0.0, 1.0)
    assert sink.commands[-1] == driving.command

def test_feedback_is_throttled():
    tracker, _ = make_tracker()
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)

    emitted = []
    for i in range(41):
        now = i * 0.05
        result = tracker.tick(Pose2D(0.0, 0.0, 0.0), now)
        if result.feedback is not None:
            emitted.append(now)

    assert len(emitted) >= 4
    for earlier, later in zip(emitted, emitted[1:]):
        assert later - earlier >= 0.5

def test_waits_for_first_pose_without_moving():
    tracker, sink = make_tracker()
    assert tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0) is False

    result = tracker.tick(None, 0.05)

    assert result.command.is_zero()
    assert result.outcome is None
    assert result.feedback is None
    assert tracker.state == TrackerState.TRACKING

    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.1)
    assert result.command.linear == pytest.approx(1.0)

def test_pose_timeout_aborts():
    tracker, sink = make_tracker(TrackerConfig(pose_timeout=1.0))
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)

    assert tracker.tick(None, 0.5).outcome is None
    result = tracker.tick(None, 1.0)

    assert result.outcome.kind == OutcomeKind.ABORTED
    assert result.outcome.reason == AbortReason.NO_POSE_AVAILABLE
    assert result.command.is_zero()
    assert tracker.state == TrackerState.ABORTED

def test_pose_timeout_counts_from_first_tick_without_start_time():
    tracker, _ = make_tracker(TrackerConfig(pose_timeout=1.0))
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0))

    assert tracker.tick(None, 100.0).outcome is None
    assert tracker.tick(None, 101.0).outcome.reason == AbortReason.NO_POSE_AVAILABLE

def test_missing_sample_after_first_pose_keeps_tracking():
    tracker, sink = make_tracker(TrackerConfig(pose_timeout=1.0))
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)
    tracker.tick(Pose2D(0.1, 0.0, 0.0), 2.0)

    result = tracker.tick(None, 2.05)

    assert result.outcome is None
    assert result.command.is_zero()
    assert tracker.is_active()
    assert sink.commands[-1].is_zero()

    result = tracker.tick(Pose2D(0.2, 0.0, 0.0), 2.1)
    assert result.command.linear == pytest.approx(1.0)

def test_pose_source_going_quiet_does_not_abort_session():
    # One sample is read by start(), one by the first tick, then the source goes quiet
    source = ScriptedPoseSource([Pose2D(0.0, 0.0, 0.0), Pose2D(0.0, 0.0, 0.0), None])
    tracker, _ = make_tracker(TrackerConfig(pose_timeout=1.0), source=source)
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(None, 0.0)

    result = tracker.tick(None, 5.0)

    assert result.outcome is None
    assert result.command.is_zero()

def test_goal_outside_workspace_rejected():
    tracker, _ = make_tracker(TrackerConfig(workspace=TURTLESIM_WORKSPACE))

    with pytest.raises(GoalOutOfBounds):
        tracker.start(Goal(20.0, 5.0, 0.0, 1.0), now=0.0)

    assert tracker.state == TrackerState.IDLE

def test_invalid_goal_rejected():
    with pytest.raises(InvalidGoal):
        Goal(1.0, 1.0, 0.0, 0.0)
    with pytest.raises(InvalidGoal):
        Goal(float("nan"), 1.0, 0.0, 1.0)

def test_abort_stops_with_reason():
    tracker, sink = make_tracker()
    tracker.start(Goal(10.0, 0.0, 0.0, 1.0), now=0.0)
    tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0)

    tracker.abort(AbortReason.SHUTDOWN)
    result = tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.05)

    assert result.outcome.kind == OutcomeKind.ABORTED
    assert result.outcome.reason == AbortReason.SHUTDOWN
    assert sink.commands[-1].is_zero()

def test_tick_while_idle_does_nothing():
    tracker, sink = make_tracker()

    assert tracker.tick(Pose2D(0.0, 0.0, 0.0), 0.0) is None
    assert sink.commands == []

def test_reads_latest_pose_from_source():
    cache = LatestPoseCache()
    cache.update(Pose2D(0.0, 0.0, 0.0))
    tracker, _ = make_tracker(source=cache)

    assert tracker.start(Goal(0.0, 10.0, 0.0, 1.0), now=0.0) is True
    result = tracker.tick(None, 0.0)

    assert result.command.angular == pytest.approx(math.pi)

def test_reaches_goal_in_simulation():
    # Unicycle model integrated at the control rate
    config = TrackerConfig()
    tracker, sink = make_tracker(config)
    goal = Goal(5.0, 5.0, math.pi / 2, 1.0)
    tracker.start(goal, now=0.0)

    x, y, theta = 1.0, 1.0, 0.0
    dt = config.control_period
    outcome = None
    for i in range(4000):
        result = tracker.tick(Pose2D(x, y, theta), i * dt)
        if result.outcome is not None:
            outcome = result.outcome
            break
        x += result.command.linear * math.cos(theta) * dt
        y += result.command.linear * math.sin(theta) * dt
        theta += result.command.angular * dt

    assert outcome is not None
    assert outcome.kind == OutcomeKind.SUCCEEDED
    assert outcome.final_distance <= config.distance_tolerance
    assert sink.commands[-1].is_zero()
