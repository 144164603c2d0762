# Type defs for Ros Configurations:

from enum import Enum
from dataclasses import dataclass

# Topic and action names, relative so they can be remapped per turtle
class TopicKey(str, Enum):
    POSE = 'turtle1/pose'
    CMD_VEL = 'turtle1/cmd_vel'
    TRACK_GOAL = 'turtle1/track_goal'

# Data class for ros configurations
@dataclass(frozen=True)
class RosConfig:
    pose_topic: str = TopicKey.POSE.value
    velocity_topic: str = TopicKey.CMD_VEL.value
    tracking_server: str = TopicKey.TRACK_GOAL.value
    max_messages: int = 10
