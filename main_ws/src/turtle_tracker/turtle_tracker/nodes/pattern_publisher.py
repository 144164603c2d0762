import rclpy
from rclpy.logging import get_logger
from rclpy.node import Node

from turtle_tracker.adapters.twist_sink import TwistPublisherSink
from turtle_tracker.controllers.motion_patterns import MotionPattern

from robot_common.logging import log_debug, log_error, log_info

from turtle_tracker.config.ros_presets import STD_CFG as ROS_CONFIG
from turtle_tracker.config.tracker_presets import DEFAULT_PATTERNS as PATTERN_CONFIG


class PatternPublisher(Node):
    """
    Publishes an open loop motion pattern on the turtle velocity topic.

    Parameters:
        pattern: circle | square | spiral | random
        seed: random walk seed, negative for a fresh seed every run
    """

    def __init__(self):
        super().__init__('pattern_publisher')

        self._last_log_event = log_info(self.get_logger(), 'Starting Pattern Publisher Node...')

        self._ros_config = ROS_CONFIG
        self._pattern_config = PATTERN_CONFIG

        pattern_name = self.declare_parameter('pattern', 'circle').value
        seed = self.declare_parameter('seed', -1).value
        self._pattern = MotionPattern(
            pattern_name,
            self._pattern_config,
            seed=seed if seed >= 0 else None,
        )

        self._velocity_sink = TwistPublisherSink(
            self,
            self._ros_config.velocity_topic,
            self._ros_config.max_messages
        )

        self._timer = self.create_timer(self._pattern_config.period, self._timer_callback)
        self._last_log_event = log_info(
            self.get_logger(),
            f"Publishing '{pattern_name}' every {self._pattern_config.period:.2f}s on {self._ros_config.velocity_topic}"
        )

    #----------------------------------------------------------------------------------
    def _timer_callback(self):
        cmd = self._pattern.next_command()
        self._velocity_sink.publish(cmd)
        self._last_log_event = log_debug(
            self.get_logger(),
            f"linear={cmd.linear:.2f} angular={cmd.angular:.2f}",
            last_event=self._last_log_event,
        )

    #----------------------------------------------------------------------------------
    def destroy_node(self):
        self._timer.cancel()
        self._velocity_sink.stop()
        return super().destroy_node()

#**************************************************************************************
def main(args=None):
    rclpy.init(args=args)
    try:
        pattern_publisher = PatternPublisher()
    except ValueError as e:
        log_error(get_logger('pattern_publisher'), e, main.__qualname__, 'Invalid pattern parameter')
        rclpy.try_shutdown()
        raise

    try:
        rclpy.spin(pattern_publisher)
    except KeyboardInterrupt:
        pattern_publisher.get_logger().info('Keyboard interrupt, stopping the turtle.')
    finally:
        pattern_publisher.destroy_node()
        rclpy.try_shutdown()


if __name__ == '__main__':
    main()
