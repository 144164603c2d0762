from turtlesim.msg import Pose

from turtle_tracker.adapters.pose_cache import LatestPoseCache
from turtle_tracker.tracking_types import Pose2D


def pose_from_msg(msg: Pose) -> Pose2D:
    return Pose2D(x=float(msg.x), y=float(msg.y), heading=float(msg.theta))


class TurtlePoseListener:
    def __init__(self, node, topic_name: str, cache: LatestPoseCache, message_limit: int = 10):
        """
        Subscribes to a turtlesim pose topic and keeps the cache up to date.
        """
        self._cache = cache
        self._sub = node.create_subscription(
            Pose,
            topic_name,
            self._callback,
            message_limit
        )

    #--------------------------------------------------------------------------------
    def _callback(self, msg: Pose):
        self._cache.update(pose_from_msg(msg))
