from typing import Optional, Protocol
import threading

from turtle_tracker.tracking_types import Pose2D


class PoseSource(Protocol):
    def latest(self) -> Optional[Pose2D]:
        ...


class LatestPoseCache:
    def __init__(self):
        """
        Holds the most recent pose sample only.
        Writers call update(), the control loop reads latest().
        """
        self._lock = threading.Lock()
        self._latest: Optional[Pose2D] = None

    #--------------------------------------------------------------------------------
    def update(self, pose: Pose2D):
        with self._lock:
            self._latest = pose

    #--------------------------------------------------------------------------------
    def latest(self) -> Optional[Pose2D]:
        with self._lock:
            return self._latest
