import math
from typing import List

from tracksnap import config
from tracksnap.connections import ConnectionPoint, get_connection_points
from tracksnap.geometry import distance, opposition_error
from tracksnap.pieces import Piece, StraightPiece, is_straight


def is_reasonable_connection(delta_x: float, delta_y: float) -> bool:
    """
    A snap may only nudge a piece a little. Larger corrections mean the
    user is not actually near that connection point.
    """
    return math.hypot(delta_x, delta_y) <= config.MAX_SNAP_ADJUSTMENT


def _end_is_on_straight(piece: Piece, point: ConnectionPoint) -> bool:
    half = config.STRAIGHT_LENGTH / 2
    gap = distance((piece.x, piece.y), point.position)
    return abs(gap - half) <= config.STRAIGHT_END_TOLERANCE


def has_valid_geometry(
    piece1: Piece,
    piece2: Piece,
    conn1: ConnectionPoint,
    conn2: ConnectionPoint
) -> bool:
    """Strict geometric check for a joint in an imported layout."""
    if distance(conn1.position, conn2.position) > config.GEOMETRY_DISTANCE:
        return False
    if opposition_error(conn1.angle, conn2.angle) > config.STRICT_ANGLE_TOLERANCE:
        return False

    if is_straight(piece1) and not _end_is_on_straight(piece1, conn1):
        return False
    if is_straight(piece2) and not _end_is_on_straight(piece2, conn2):
        return False

    if is_straight(piece1) and is_straight(piece2):
        centre_gap = distance((piece1.x, piece1.y), (piece2.x, piece2.y))
        if abs(centre_gap - config.STRAIGHT_LENGTH) > config.STRAIGHT_PAIR_TOLERANCE:
            return False

    return True


def validate_straight_length(piece: StraightPiece) -> List[str]:
    """Check both ends of a straight sit half a length from its centre."""
    warnings = []
    for point in get_connection_points(piece):
        if not _end_is_on_straight(piece, point):
            gap = distance((piece.x, piece.y), point.position)
            warnings.append(
                f"End at ({point.x:.2f}, {point.y:.2f}) is {gap:.2f} from centre, "
                f"expected {config.STRAIGHT_LENGTH / 2:.2f}"
            )
    return warnings
