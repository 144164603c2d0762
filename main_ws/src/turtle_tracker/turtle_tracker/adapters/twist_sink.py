from geometry_msgs.msg import Twist

from turtle_tracker.conversions import fill_twist
from turtle_tracker.tracking_types import VelocityCommand


class TwistPublisherSink:
    def __init__(self, node, topic_name: str, message_limit: int = 10):
        """
        Publishes tracker velocity commands as geometry_msgs/Twist.
        """
        self._pub = node.create_publisher(Twist, topic_name, message_limit)

    #--------------------------------------------------------------------------------
    def publish(self, cmd: VelocityCommand):
        self._pub.publish(fill_twist(Twist(), cmd))

    #--------------------------------------------------------------------------------
    def stop(self):
        self.publish(VelocityCommand.zero())
