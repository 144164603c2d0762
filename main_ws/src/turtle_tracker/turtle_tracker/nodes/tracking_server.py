from typing import Optional
import threading
import time

import rclpy
from rclpy.node import Node
from rclpy.action import(
    ActionServer,
    CancelResponse,
    GoalResponse,
)
from rclpy.action.server import ServerGoalHandle

from rclpy.callback_groups import ReentrantCallbackGroup
from rclpy.executors import MultiThreadedExecutor

from turtle_tracker_interfaces.action import TrackGoal
from turtle_tracker.adapters.pose_cache import LatestPoseCache
from turtle_tracker.adapters.pose_listener import TurtlePoseListener
from turtle_tracker.adapters.twist_sink import TwistPublisherSink
from turtle_tracker.controllers.goal_tracker import GoalTracker, distance_to_goal
from turtle_tracker.conversions import fill_feedback_msg, fill_result_msg, goal_from_msg
from turtle_tracker.errors import AlreadyActive, TrackerError
from turtle_tracker.tracking_types import AbortReason, Outcome, OutcomeKind

from robot_common.logging import log_error, log_info, log_warn

from turtle_tracker.config.ros_presets import STD_CFG as ROS_CONFIG
from turtle_tracker.config.tracker_presets import TURTLESIM_TRACKER as TRACKER_CONFIG


class TrackingServer(Node):

    def __init__(self):
        super().__init__('tracking_server')

        self._last_log_event = log_info(self.get_logger(), 'Starting Tracking Server Node...')

        self._ros_config = ROS_CONFIG
        self._goal_callback_lock = threading.Lock()
        self._cb_group = ReentrantCallbackGroup()   # Allows cancel/pose callbacks while a goal executes

        # Latest turtle pose, fed by the pose subscription:
        self._pose_cache = LatestPoseCache()
        self._pose_listener = TurtlePoseListener(
            self,
            self._ros_config.pose_topic,
            self._pose_cache,
            self._ros_config.max_messages
        )

        # Velocity commands go straight to the turtle:
        self._velocity_sink = TwistPublisherSink(
            self,
            self._ros_config.velocity_topic,
            self._ros_config.max_messages
        )

        self._tracker = GoalTracker(
            pose_source=self._pose_cache,
            velocity_sink=self._velocity_sink,
            config=TRACKER_CONFIG,
            logger=self.get_logger(),
        )

        # Initialize the action server
        self._last_log_event = log_info(self.get_logger(), 'Initializing Action Server...')
        self._action_server = ActionServer(
            self,
            TrackGoal,
            self._ros_config.tracking_server,
            execute_callback=self.execute_callback,
            goal_callback=self.goal_callback,
            cancel_callback=self.cancel_callback,
            callback_group=self._cb_group
        )
        self._last_log_event = log_info(self.get_logger(), 'Tracking Action Server initialized.')

    #----------------------------------------------------------------------------------
    def goal_callback(self, goal_request: TrackGoal.Goal):
        """Accepts the goal only if nothing else is being tracked."""
        self._last_log_event = log_info(self.get_logger(), 'Received goal request', last_event=self._last_log_event)

        with self._goal_callback_lock:
            if self._tracker.is_active():
                self._last_log_event = log_warn(self.get_logger(), 'Tracker is busy, rejecting goal request')
                return GoalResponse.REJECT
            try:
                goal = goal_from_msg(goal_request)
                self._tracker.start(goal)
            except AlreadyActive:
                self._last_log_event = log_warn(self.get_logger(), 'Tracker is busy, rejecting goal request')
                return GoalResponse.REJECT
            except TrackerError as e:
                self._last_log_event = log_error(
                    self.get_logger(),
                    e,
                    self.goal_callback.__qualname__,
                    'Rejecting goal request',
                )
                return GoalResponse.REJECT

            # Goal will execute in execute_callback
            return GoalResponse.ACCEPT

    #----------------------------------------------------------------------------------
    def cancel_callback(self, goal_handle: ServerGoalHandle):
        """Executes upon receiving a cancel request."""
        self._last_log_event = log_info(self.get_logger(), 'Received cancel request')
        self._tracker.cancel()
        return CancelResponse.ACCEPT

    #----------------------------------------------------------------------------------
    def execute_callback(self, goal_handle: ServerGoalHandle):
        """Runs the control loop for an accepted goal until the tracker reports an outcome."""

        result_msg = TrackGoal.Result()
        delay_s = self._tracker.config.control_period
        goal = self._tracker.goal
        outcome: Optional[Outcome] = None

        while outcome is None:
            if not rclpy.ok():
                self._tracker.abort(AbortReason.SHUTDOWN)

            #  ----- Forward cancel requests that bypassed cancel_callback -----
            if goal_handle.is_cancel_requested:
                self._tracker.cancel()

            result = self._tracker.tick(None, self._now())
            if result is None:
                # Tracker was reset underneath us
                outcome = Outcome.aborted(AbortReason.EXTERNAL)
                break

            if result.feedback is not None:
                goal_handle.publish_feedback(fill_feedback_msg(TrackGoal.Feedback(), result.feedback))

            if result.is_terminal:
                outcome = result.outcome
                break

            time.sleep(delay_s)

        # ----- Report the outcome -----
        if outcome.kind == OutcomeKind.SUCCEEDED:
            goal_handle.succeed()
        elif outcome.kind == OutcomeKind.CANCELLED:
            goal_handle.canceled()
        else:
            goal_handle.abort()

        pose = self._pose_cache.latest()
        remaining = distance_to_goal(pose, goal) if pose is not None and goal is not None else 0.0
        fill_result_msg(result_msg, outcome, remaining)

        self._cleanup_execution()
        return result_msg

    #----------------------------------------------------------------------------------
    def _cleanup_execution(self):
        """Reset the tracker to IDLE and make sure the turtle is stopped."""
        # A goal accepted since the outcome keeps driving, no stop for it
        if self._tracker.reset():
            self._velocity_sink.stop()

    #----------------------------------------------------------------------------------
    def _now(self) -> float:
        return self.get_clock().now().nanoseconds / 1e9

    #----------------------------------------------------------------------------------
    def destroy_node(self):
        self._tracker.abort(AbortReason.SHUTDOWN)
        self._velocity_sink.stop()
        self._action_server.destroy()
        return super().destroy_node()

#**************************************************************************************
# Main function to initialize the ROS node and start the action server
def main(args=None):
    rclpy.init(args=args)
    tracking_server = TrackingServer()

    # Create a multi-threaded executor to handle multiple callbacks
    executor = MultiThreadedExecutor()
    executor.add_node(tracking_server)
    try:
        executor.spin()
    except KeyboardInterrupt:
        tracking_server.get_logger().info('Keyboard interrupt, shutting down tracking server.')
    finally:
        tracking_server.destroy_node()
        executor.shutdown()
        rclpy.try_shutdown()


if __name__ == '__main__':
    main()
