import math

TWO_PI = 2.0 * math.pi

def wrap_to_pi(angle: float) -> float:
    """
    Wrap an angle into (-pi, pi].
    Args:
        angle: angle in radians
    Returns:
        equivalent angle in (-pi, pi]
    """
    wrapped = math.fmod(angle + math.pi, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    wrapped -= math.pi
    # -pi belongs to the +pi end
    if wrapped <= -math.pi:
        return math.pi
    return wrapped
#--------------------------------------------------------------------------------
def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

#--------------------------------------------------------------------------------
def euclidean(dx: float, dy: float) -> float:
    """Length of the (dx, dy) offset."""
    return math.hypot(dx, dy)

#--------------------------------------------------------------------------------
def heading_to(x, y, tx, ty):
    # Bearing from (x, y) towards (tx, ty)
    return math.atan2(ty - y, tx - x)
