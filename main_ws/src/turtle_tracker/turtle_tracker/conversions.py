"""
Copy values between the tracker types and ROS messages.

Functions fill message instances passed in by the caller, so this module does
not import any generated message package.
"""
from turtle_tracker.tracking_types import (
    Feedback,
    Goal,
    Outcome,
    OutcomeKind,
    VelocityCommand,
)


def goal_from_msg(msg) -> Goal:
    """TrackGoal.Goal -> Goal. Raises InvalidGoal for unusable fields."""
    return Goal(
        target_x=float(msg.target_x),
        target_y=float(msg.target_y),
        target_heading=float(msg.target_heading),
        cruise_speed=float(msg.cruise_speed),
    )

#--------------------------------------------------------------------------------
def fill_goal_msg(msg, goal: Goal):
    msg.target_x = float(goal.target_x)
    msg.target_y = float(goal.target_y)
    msg.target_heading = float(goal.target_heading)
    msg.cruise_speed = float(goal.cruise_speed)
    return msg

#--------------------------------------------------------------------------------
def fill_feedback_msg(msg, feedback: Feedback):
    msg.pose.x = float(feedback.pose.x)
    msg.pose.y = float(feedback.pose.y)
    msg.pose.heading = float(feedback.pose.heading)
    msg.distance_remaining = float(feedback.distance_remaining)
    return msg

#--------------------------------------------------------------------------------
def fill_result_msg(msg, outcome: Outcome, distance_remaining: float = 0.0):
    """
    TrackGoal.Result from an outcome.
    distance_remaining is reported for cancelled/aborted goals, which carry no
    final distance of their own.
    """
    msg.outcome = int(outcome.kind)
    if outcome.final_distance is not None:
        msg.final_distance = float(outcome.final_distance)
    else:
        msg.final_distance = float(distance_remaining)
    msg.reason = outcome.reason.value if outcome.reason is not None else ""
    return msg

#--------------------------------------------------------------------------------
def describe_result(msg) -> str:
    kind = OutcomeKind(msg.outcome)
    text = f"{kind.name.lower()} (distance {msg.final_distance:.3f})"
    if msg.reason:
        text += f": {msg.reason}"
    return text

#--------------------------------------------------------------------------------
def fill_twist(twist, cmd: VelocityCommand):
    twist.linear.x = float(cmd.linear)
    twist.angular.z = float(cmd.angular)
    return twist
