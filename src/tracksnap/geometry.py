import math
from typing import Tuple

Point = Tuple[float, float]

TWO_PI = 2 * math.pi


def normalize_angle(angle: float) -> float:
    """Map an angle into [0, 2π)."""
    a = math.fmod(angle, TWO_PI)
    if a < 0:
        a += TWO_PI
    # fmod of a value a hair below 0 can land exactly on 2π after the shift
    if a >= TWO_PI:
        a = 0.0
    return a


def normalize_signed_angle(angle: float) -> float:
    """Map an angle into (-π, π]."""
    a = normalize_angle(angle)
    if a > math.pi:
        a -= TWO_PI
    return a


def angle_difference(a1: float, a2: float) -> float:
    """Smallest absolute difference between two angles, in [0, π]."""
    return abs(normalize_signed_angle(a1 - a2))


def opposition_error(a1: float, a2: float) -> float:
    """
    How far two facing angles are from pointing exactly at each other.
    Zero when they differ by π (modulo 2π).
    """
    return abs(normalize_signed_angle(a1 - a2 - math.pi))


def distance(p1: Point, p2: Point) -> float:
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def rotate_point(point: Point, angle: float) -> Point:
    x, y = point
    c = math.cos(angle)
    s = math.sin(angle)
    return (c * x - s * y, s * x + c * y)


def to_world(point: Point, origin: Point, rotation: float) -> Point:
    """
    Transform a point from a piece's local frame to world coordinates.
    P_world = (Rotation * P_local) + Position
    """
    rx, ry = rotate_point(point, rotation)
    return (rx + origin[0], ry + origin[1])


def snap_to_increment(value: float, increment: float) -> float:
    return round(value / increment) * increment
