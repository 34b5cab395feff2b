"""
Semantic checks on a single joint between two pieces.

Geometry alone says whether two ends touch; track flow says whether the
track could actually run through the joint, e.g. that two straights
meeting end to end are collinear rather than kinked.
"""

import logging
import math
from typing import Optional

from tracksnap import config
from tracksnap.connections import ConnectionPoint
from tracksnap.geometry import angle_difference, normalize_angle, opposition_error
from tracksnap.pieces import Piece, is_straight

logger = logging.getLogger(__name__)

NORTH_SOUTH = "north_south"
EAST_WEST = "east_west"


def compass_axis(angle: float, tolerance: float = config.COMPASS_TOLERANCE) -> Optional[str]:
    """
    Bucket a facing into the north/south or east/west axis.
    Facings more than `tolerance` from every compass direction get None.
    """
    a = normalize_angle(angle)
    if min(angle_difference(a, math.pi / 2), angle_difference(a, 3 * math.pi / 2)) <= tolerance:
        return NORTH_SOUTH
    if min(angle_difference(a, 0.0), angle_difference(a, math.pi)) <= tolerance:
        return EAST_WEST
    return None


def _straight_straight(piece1: Piece, piece2: Piece) -> bool:
    diff = angle_difference(piece1.rotation, piece2.rotation)
    parallel = diff < config.PARALLEL_TOLERANCE
    anti_parallel = abs(diff - math.pi) < config.PARALLEL_TOLERANCE
    return parallel or anti_parallel


def _straight_curve(
    straight: Piece,
    curve: Piece,
    straight_conn: ConnectionPoint,
    curve_conn: ConnectionPoint
) -> bool:
    if opposition_error(straight_conn.angle, curve_conn.angle) > config.STRICT_ANGLE_TOLERANCE:
        return False

    # Never fires once the opposition gate passes: compass buckets are
    # symmetric under a half turn
    straight_axis = compass_axis(straight_conn.angle)
    curve_axis = compass_axis(curve_conn.angle)
    if (straight_axis, curve_axis) in ((NORTH_SOUTH, EAST_WEST), (EAST_WEST, NORTH_SOUTH)):
        logger.debug(
            "Rejecting straight facing %s into curve facing %s", straight_axis, curve_axis
        )
        return False

    relative = normalize_angle(curve.rotation - straight.rotation)
    eighth = math.pi / 4
    nearest = round(relative / eighth) * eighth
    return abs(relative - nearest) <= config.RELATIVE_ROTATION_TOLERANCE + config.ANGLE_EPSILON


def _curve_curve(conn1: ConnectionPoint, conn2: ConnectionPoint) -> bool:
    return opposition_error(conn1.angle, conn2.angle) <= config.STRICT_ANGLE_TOLERANCE


def validate_track_flow(
    piece1: Piece,
    piece2: Piece,
    conn1: ConnectionPoint,
    conn2: ConnectionPoint
) -> bool:
    """
    Check that track can run from piece1 into piece2 through the joint
    formed by conn1 (on piece1) and conn2 (on piece2).
    """
    straight1 = is_straight(piece1)
    straight2 = is_straight(piece2)

    if straight1 and straight2:
        return _straight_straight(piece1, piece2)
    if straight1:
        return _straight_curve(piece1, piece2, conn1, conn2)
    if straight2:
        return _straight_curve(piece2, piece1, conn2, conn1)
    return _curve_curve(conn1, conn2)
