# Command line client for the tracking action server:
#   ros2 run turtle_tracker tracking_client X Y THETA SPEED [--cancel-after SECONDS]

import sys
from typing import Optional

import rclpy
from rclpy.node import Node
from rclpy.action import ActionClient
from rclpy.utilities import remove_ros_args

from turtle_tracker_interfaces.action import TrackGoal
from turtle_tracker.config.ros_presets import STD_CFG as ROS_CONFIG
from turtle_tracker.conversions import describe_result, fill_goal_msg
from turtle_tracker.tools.goal_args import parse_goal
from turtle_tracker.tracking_types import Goal

from robot_common.logging import log_error, log_info, log_warn


class TrackingClient(Node):
    def __init__(self, cancel_after: Optional[float] = None):
        super().__init__('tracking_client')
        self._action_client = ActionClient(self, TrackGoal, ROS_CONFIG.tracking_server)
        self._goal_handle = None
        self._cancel_after = cancel_after
        self._cancel_timer = None
        self._last_log_event = None
        self.done = False

    #--------------------------------------------------------------------------------
    def send_goal(self, goal: Goal, server_timeout: float = 5.0) -> bool:
        if not self._action_client.wait_for_server(timeout_sec=server_timeout):
            self._last_log_event = log_warn(self.get_logger(), 'Tracking server not available')
            return False

        goal_msg = fill_goal_msg(TrackGoal.Goal(), goal)
        self._last_log_event = log_info(
            self.get_logger(),
            f'Sending goal x={goal.target_x:.2f} y={goal.target_y:.2f} '
            f'theta={goal.target_heading:.2f} speed={goal.cruise_speed:.2f}'
        )
        send_future = self._action_client.send_goal_async(goal_msg, feedback_callback=self.feedback_callback)
        send_future.add_done_callback(self.goal_response_callback)
        return True

    #--------------------------------------------------------------------------------
    def goal_response_callback(self, future):
        goal_handle = future.result()
        if not goal_handle.accepted:
            self._last_log_event = log_warn(self.get_logger(), 'Goal rejected')
            self.done = True
            return

        self._goal_handle = goal_handle
        self._last_log_event = log_info(self.get_logger(), 'Goal accepted')
        goal_handle.get_result_async().add_done_callback(self.result_callback)

        if self._cancel_after is not None:
            self._cancel_timer = self.create_timer(self._cancel_after, self._cancel_timer_callback)

    #--------------------------------------------------------------------------------
    def feedback_callback(self, feedback_msg):
        fb = feedback_msg.feedback
        self._last_log_event = log_info(
            self.get_logger(),
            f'Pose x={fb.pose.x:.2f} y={fb.pose.y:.2f} heading={fb.pose.heading:.2f}, '
            f'{fb.distance_remaining:.2f} remaining',
        )

    #--------------------------------------------------------------------------------
    def result_callback(self, future):
        result = future.result().result
        self._last_log_event = log_info(self.get_logger(), f'Goal finished: {describe_result(result)}')
        self.done = True

    #--------------------------------------------------------------------------------
    def _cancel_timer_callback(self):
        self._cancel_timer.cancel()
        if self._goal_handle is None:
            return
        self._last_log_event = log_info(self.get_logger(), 'Cancelling goal')
        self._goal_handle.cancel_goal_async()


def main(args=None):
    # ros2 run appends --ros-args, keep only our own arguments
    argv = remove_ros_args(args if args is not None else sys.argv)[1:]
    goal, cli_args = parse_goal(argv)

    rclpy.init(args=args)
    tracking_client = TrackingClient(cancel_after=cli_args.cancel_after)

    try:
        if tracking_client.send_goal(goal, cli_args.server_timeout):
            while rclpy.ok() and not tracking_client.done:
                rclpy.spin_once(tracking_client, timeout_sec=0.1)
    except KeyboardInterrupt:
        tracking_client.get_logger().info('Keyboard interrupt, leaving goal running on the server.')
    except Exception as e:
        log_error(tracking_client.get_logger(), e, main.__qualname__, 'Tracking client failed')
        raise
    finally:
        tracking_client.destroy_node()
        rclpy.try_shutdown()


if __name__ == '__main__':
    main()
