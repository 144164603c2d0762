"""Errors raised when a tracking goal cannot be started."""


class TrackerError(Exception):
    """Base class for goal tracker errors."""


class AlreadyActive(TrackerError):
    """A goal was started while another one is still being tracked."""


class InvalidGoal(TrackerError):
    """Goal fields are not usable (e.g. non positive cruise speed)."""


class GoalOutOfBounds(TrackerError):
    def __init__(self, x: float, y: float, workspace):
        super().__init__(
            f"Goal ({x:.3f}, {y:.3f}) is outside the workspace "
            f"x:[{workspace.min_x}, {workspace.max_x}] y:[{workspace.min_y}, {workspace.max_y}]"
        )
        self.x = x
        self.y = y
        self.workspace = workspace
