import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from tracksnap import config
from tracksnap.geometry import (
    distance,
    normalize_signed_angle,
    opposition_error,
    snap_to_increment,
    to_world,
)
from tracksnap.pieces import CurvePiece, Piece, StraightPiece, SwitchPiece, is_curve_family

MALE = "male"
FEMALE = "female"


@dataclass(frozen=True)
class ConnectionPoint:
    x: float
    y: float
    angle: float  # Facing of the joint; two points join when these face each other
    type: str  # "male" or "female"

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class RotationFit:
    can_connect: bool
    rotation_needed: float


def _straight_points(piece: StraightPiece) -> List[ConnectionPoint]:
    half = config.STRAIGHT_LENGTH / 2
    cos = math.cos(piece.rotation)
    sin = math.sin(piece.rotation)
    # Ends carry the transverse direction of the track, not the travel direction
    return [
        ConnectionPoint(piece.x - half * cos, piece.y - half * sin, piece.rotation + math.pi / 2, MALE),
        ConnectionPoint(piece.x + half * cos, piece.y + half * sin, piece.rotation - math.pi / 2, FEMALE),
    ]


def _arc_exit(piece: Piece, direction: int) -> ConnectionPoint:
    """Far end of the 22.5° arc whose centre sits at local (-R, 0)."""
    radius = config.CURVE_RADIUS
    end_angle = config.CURVE_ANGLE_SPAN * direction
    local = (-radius + radius * math.cos(end_angle), radius * math.sin(end_angle))
    x, y = to_world(local, (piece.x, piece.y), piece.rotation)
    return ConnectionPoint(x, y, piece.rotation + end_angle, FEMALE)


def _entry(piece: Piece) -> ConnectionPoint:
    return ConnectionPoint(piece.x, piece.y, piece.rotation + math.pi, MALE)


def _curve_points(piece: CurvePiece) -> List[ConnectionPoint]:
    direction = -1 if piece.flipped else 1
    return [_entry(piece), _arc_exit(piece, direction)]


def _switch_points(piece: SwitchPiece) -> List[ConnectionPoint]:
    direction = 1 if piece.hand == "left" else -1
    if piece.flipped:
        direction = -direction
    # Through leg follows the tangent the diverging arc leaves the entry on
    x, y = to_world((0.0, config.SWITCH_LENGTH * direction), (piece.x, piece.y), piece.rotation)
    through = ConnectionPoint(x, y, piece.rotation, FEMALE)
    return [_entry(piece), through, _arc_exit(piece, direction)]


def get_connection_points(piece: Piece) -> List[ConnectionPoint]:
    """
    Compute a piece's connection points in world coordinates.
    Order is entry first, then exits.
    """
    if isinstance(piece, StraightPiece):
        return _straight_points(piece)
    if isinstance(piece, CurvePiece):
        return _curve_points(piece)
    if isinstance(piece, SwitchPiece):
        return _switch_points(piece)
    raise TypeError(f"Not a track piece: {piece!r}")


def can_connect(
    p1: ConnectionPoint,
    p2: ConnectionPoint,
    distance_tolerance: float = config.CONNECT_DISTANCE,
    angle_tolerance: float = config.CONNECT_ANGLE_TOLERANCE
) -> bool:
    """
    Check if two connection points are close together and face each other.
    """
    if distance(p1.position, p2.position) > distance_tolerance:
        return False
    return opposition_error(p1.angle, p2.angle) <= angle_tolerance


def is_valid_connection_types(
    piece1: Piece,
    piece2: Piece,
    p1: ConnectionPoint,
    p2: ConnectionPoint
) -> bool:
    """
    Same-family joins must alternate male/female; mixed joins take any pairing.
    """
    if piece1.family == piece2.family:
        return p1.type != p2.type
    return True


def rotation_increment(piece: Piece) -> float:
    if is_curve_family(piece):
        return config.CURVE_ROTATION_INCREMENT
    return config.STRAIGHT_ROTATION_INCREMENT


def can_connect_with_rotation(
    piece1: Piece,
    piece2: Piece,
    p1: ConnectionPoint,
    p2: ConnectionPoint
) -> RotationFit:
    """
    Check whether rotating piece1 by a whole rotation increment would make
    p1 face p2. Returns the snapped rotation either way.
    """
    if not is_valid_connection_types(piece1, piece2, p1, p2):
        return RotationFit(False, 0.0)

    target = p2.angle + math.pi
    delta = normalize_signed_angle(target - p1.angle)
    delta = snap_to_increment(delta, rotation_increment(piece1))

    aligned = opposition_error(p1.angle + delta, p2.angle) <= config.STRICT_ANGLE_TOLERANCE
    close = distance(p1.position, p2.position) <= config.CONNECT_DISTANCE
    return RotationFit(aligned and close, delta)


def find_joined_pair(
    piece1: Piece,
    piece2: Piece,
    tolerance: float = config.JOINED_DISTANCE
) -> Optional[Tuple[ConnectionPoint, ConnectionPoint]]:
    """
    First pair of connection points (one per piece) lying within `tolerance`.
    """
    for c1 in get_connection_points(piece1):
        for c2 in get_connection_points(piece2):
            if distance(c1.position, c2.position) <= tolerance:
                return c1, c2
    return None


def build_connection_graph(pieces: Sequence[Piece]) -> List[Tuple[int, int]]:
    """
    Build an edge list of pieces joined by a compatible connection.
    """
    # Avoid import cycle: scene_graph imports this module for piece bounds
    from tracksnap.scene_graph import SceneGraph

    sg = SceneGraph(pieces)
    part_connections = [get_connection_points(p) for p in pieces]
    connections = set()

    for i, points_a in enumerate(part_connections):
        for cp_a in points_a:
            for j in sg.query_point(cp_a.position, tolerance=config.CONNECT_DISTANCE):
                if i == j:
                    continue
                if any(can_connect(cp_a, cp_b) for cp_b in part_connections[j]):
                    connections.add(tuple(sorted((i, j))))

    return sorted(connections)


def get_connected_pieces(anchor: int, pieces: Sequence[Piece]) -> List[int]:
    """
    Indices of every piece reachable from `anchor` through connections,
    anchor included.
    """
    if not 0 <= anchor < len(pieces):
        return []

    adj: List[List[int]] = [[] for _ in range(len(pieces))]
    for u, v in build_connection_graph(pieces):
        adj[u].append(v)
        adj[v].append(u)

    # BFS
    reached = {anchor}
    queue = [anchor]
    idx = 0
    while idx < len(queue):
        u = queue[idx]
        idx += 1
        for v in adj[u]:
            if v not in reached:
                reached.add(v)
                queue.append(v)

    return sorted(reached)


def get_connection_indicators(pieces: Sequence[Piece]) -> List[ConnectionPoint]:
    """All connection points of a layout, for debug overlays."""
    points = []
    for piece in pieces:
        points.extend(get_connection_points(piece))
    return points


def find_open_connections(pieces: Sequence[Piece]) -> List[ConnectionPoint]:
    """
    Connection points with no compatible partner on another piece.
    """
    owned = [(i, cp) for i, piece in enumerate(pieces) for cp in get_connection_points(piece)]
    open_points = []
    for i, cp in owned:
        if not any(j != i and can_connect(cp, other) for j, other in owned):
            open_points.append(cp)
    return open_points
