# Preset configurations for ROS2

from turtle_tracker.config.ros_config import RosConfig

# Default turtlesim setup (single turtle named turtle1):
STD_CFG = RosConfig()
