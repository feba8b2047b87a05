# easing.py
# Scalar helpers shared by the control loop and the renderer.
# =============================================================================


def clamp(x, a, b):       return a if x < a else (b if x > b else x)
def lerp(a, b, t):        return a + (b - a) * t


def map_range(v, a0, a1, b0, b1):
    """
    Linear map of v from [a0, a1] onto [b0, b1], unclamped.
    Reversed output ranges are fine (that is how the inverse maps work).
    """
    if a0 == a1:
        raise ValueError(f"cannot map from an empty range [{a0}, {a1}]")
    return b0 + (v - a0) * (b1 - b0) / (a1 - a0)
