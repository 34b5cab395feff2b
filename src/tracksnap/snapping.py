"""
Snap search: find the small pose correction that joins a moving piece to
the layout.

The search is a pipeline:
1. generate orientation variants of the moving piece (both flip states,
   ROTATION_STEPS rotation offsets),
2. pair each variant's connection points with nearby existing ones and
   keep pairs passing the cheap gates (distance, polarity, facing,
   adjustment size),
3. drop candidates whose adjusted placement fails track flow or overlaps,
4. take the candidate with the smallest connection distance; ties go to
   the earliest candidate generated.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from tracksnap import config
from tracksnap.checks import is_reasonable_connection
from tracksnap.collision import would_overlap
from tracksnap.connections import (
    ConnectionPoint,
    get_connection_points,
    is_valid_connection_types,
)
from tracksnap.geometry import distance, normalize_angle, opposition_error
from tracksnap.pieces import Piece, StraightPiece, with_pose
from tracksnap.scene_graph import SceneGraph
from tracksnap.track_flow import validate_track_flow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapResult:
    position: Tuple[float, float]
    rotation: float
    flipped: Optional[bool] = None  # None for pieces that cannot flip

    def apply(self, piece: Piece) -> Piece:
        """Return `piece` moved to the snapped pose."""
        return with_pose(piece, x=self.position[0], y=self.position[1],
                         rotation=self.rotation, flipped=self.flipped)


@dataclass(frozen=True)
class SnapCandidate:
    piece: Piece  # Moving piece after the correction
    distance: float  # Gap between the two points before the correction
    point_index: int  # Which connection point of the moving piece joins
    target_index: int  # Index of the existing piece it joins
    target_point: ConnectionPoint


def orientation_variants(piece: Piece, steps: int = config.ROTATION_STEPS) -> List[Piece]:
    """
    Every pose the search tries: current flip state first, then the mirror,
    each at `steps` evenly spaced offsets from the current rotation.
    """
    flips = [piece.flipped]
    if not isinstance(piece, StraightPiece):
        flips.append(not piece.flipped)

    step = 2 * math.pi / steps
    return [
        with_pose(piece, rotation=piece.rotation + k * step, flipped=flipped)
        for flipped in flips
        for k in range(steps)
    ]


def generate_candidates(
    piece: Piece,
    scene: SceneGraph,
    snap_distance: float
) -> Iterator[SnapCandidate]:
    """Yield every variant/point pairing that passes the cheap gates."""
    for variant in orientation_variants(piece):
        for point_index, moving in enumerate(get_connection_points(variant)):
            for target_index in scene.query_point(moving.position, tolerance=snap_distance):
                target = scene.get_piece(target_index)
                for target_point in get_connection_points(target):
                    gap = distance(moving.position, target_point.position)
                    if gap > snap_distance:
                        continue
                    if not is_valid_connection_types(variant, target, moving, target_point):
                        continue
                    if opposition_error(moving.angle, target_point.angle) > config.SNAP_ANGLE_TOLERANCE:
                        continue

                    dx = target_point.x - moving.x
                    dy = target_point.y - moving.y
                    if not is_reasonable_connection(dx, dy):
                        continue

                    adjusted = with_pose(variant, x=variant.x + dx, y=variant.y + dy)
                    yield SnapCandidate(adjusted, gap, point_index, target_index, target_point)


def is_acceptable(candidate: SnapCandidate, scene: SceneGraph) -> bool:
    """Check the whole adjusted placement, not just the joined points."""
    adjusted = candidate.piece
    target = scene.get_piece(candidate.target_index)
    joined = get_connection_points(adjusted)[candidate.point_index]

    if not validate_track_flow(adjusted, target, joined, candidate.target_point):
        return False

    reach = max(config.STRAIGHT_MIN_SEPARATION, config.CURVE_MIN_SEPARATION)
    for other_index in scene.query_point((adjusted.x, adjusted.y), tolerance=reach):
        if would_overlap(adjusted, scene.get_piece(other_index)):
            return False

    return True


def select_best(candidates: Iterable[SnapCandidate]) -> Optional[SnapCandidate]:
    """Smallest connection distance wins; the first one generated breaks ties."""
    best = None
    for candidate in candidates:
        if best is None or candidate.distance < best.distance:
            best = candidate
    return best


def find_snap_position(
    piece: Piece,
    existing_pieces: Sequence[Piece],
    snap_distance: float = config.DEFAULT_SNAP_DISTANCE
) -> Optional[SnapResult]:
    """
    Find the best snap for `piece` against `existing_pieces`.
    Returns None when no variant joins the layout cleanly.
    """
    if not existing_pieces:
        return None

    scene = SceneGraph(existing_pieces)
    candidates = generate_candidates(piece, scene, snap_distance)
    best = select_best(c for c in candidates if is_acceptable(c, scene))
    if best is None:
        return None

    snapped = best.piece
    logger.debug(
        "Snapped %s to piece %d at (%.3f, %.3f) rot=%.4f gap=%.4f",
        snapped.type, best.target_index, snapped.x, snapped.y, snapped.rotation, best.distance
    )
    flipped = None if isinstance(snapped, StraightPiece) else snapped.flipped
    return SnapResult(
        position=(snapped.x, snapped.y),
        rotation=normalize_angle(snapped.rotation),
        flipped=flipped,
    )
