import logging
import math
from typing import List, Optional, Sequence

from tracksnap import config
from tracksnap.checks import has_valid_geometry, validate_straight_length
from tracksnap.collision import check_collision
from tracksnap.connections import can_connect, get_connection_points
from tracksnap.geometry import angle_difference, distance, opposition_error
from tracksnap.pieces import CurvePiece, Piece, StraightPiece
from tracksnap.report import ValidationError, ValidationResult
from tracksnap.scene_graph import SceneGraph
from tracksnap.track_flow import validate_track_flow

logger = logging.getLogger(__name__)


def _fmt(x: float, y: float) -> str:
    return f"({x:.2f}, {y:.2f})"


def check_joints(pieces: Sequence[Piece]) -> List[ValidationError]:
    """
    Every pair of connection points close enough to be meant as a joint
    must be a compatible, well-formed joint.
    """
    errors = []
    sg = SceneGraph(pieces)
    points = [get_connection_points(p) for p in pieces]

    for i, piece1 in enumerate(pieces):
        for c1 in points[i]:
            for j in sg.query_point(c1.position, tolerance=config.JOINED_DISTANCE):
                if j <= i:
                    continue
                piece2 = pieces[j]
                for c2 in points[j]:
                    if distance(c1.position, c2.position) > config.JOINED_DISTANCE:
                        continue

                    where = (
                        f"{piece1.type} {i} at {_fmt(piece1.x, piece1.y)} and "
                        f"{piece2.type} {j} at {_fmt(piece2.x, piece2.y)}, "
                        f"joint {_fmt(c1.x, c1.y)}"
                    )
                    if not can_connect(c1, c2):
                        errors.append(ValidationError(
                            error_type="connection",
                            message=f"Incompatible connection between {where}",
                            piece_indices=[i, j]
                        ))
                    if not validate_track_flow(piece1, piece2, c1, c2):
                        errors.append(ValidationError(
                            error_type="track_flow",
                            message=f"Track cannot flow between {where}",
                            piece_indices=[i, j]
                        ))
                    if not has_valid_geometry(piece1, piece2, c1, c2):
                        errors.append(ValidationError(
                            error_type="geometry",
                            message=f"Misaligned joint between {where}",
                            piece_indices=[i, j]
                        ))

    return errors


def check_open_shape(pieces: Sequence[Piece]) -> Optional[ValidationError]:
    """
    Narrow special case: one near-horizontal straight with two opposed
    curves on its ends. If the curves' free ends spread wider than
    OPEN_SHAPE_MAX_SPREAD the layout forms an open Y/T instead of a loop.
    Other layouts are not examined.
    """
    if len(pieces) != 3:
        return None

    straights = [i for i, p in enumerate(pieces) if isinstance(p, StraightPiece)]
    curves = [i for i, p in enumerate(pieces) if isinstance(p, CurvePiece)]
    if len(straights) != 1 or len(curves) != 2:
        return None

    straight = pieces[straights[0]]
    if min(angle_difference(straight.rotation, 0.0),
           angle_difference(straight.rotation, math.pi)) > config.HORIZONTAL_TOLERANCE:
        return None

    curve_a, curve_b = pieces[curves[0]], pieces[curves[1]]
    if opposition_error(curve_a.rotation, curve_b.rotation) > config.RELATIVE_ROTATION_TOLERANCE:
        return None

    ends = get_connection_points(straight)
    free_ends = []
    used_ends = set()
    for curve in (curve_a, curve_b):
        free = None
        attached = False
        for cp in get_connection_points(curve):
            hit = next(
                (k for k, end in enumerate(ends)
                 if k not in used_ends and distance(cp.position, end.position) <= config.JOINED_DISTANCE),
                None
            )
            if hit is not None and not attached:
                used_ends.add(hit)
                attached = True
            else:
                free = cp
        if not attached or free is None:
            return None
        free_ends.append(free)

    spread = distance(free_ends[0].position, free_ends[1].position)
    if spread <= config.OPEN_SHAPE_MAX_SPREAD:
        return None

    indices = straights + curves
    return ValidationError(
        error_type="open_shape",
        message=(
            f"Curves diverge into an open Y/T shape: exits at "
            f"{_fmt(free_ends[0].x, free_ends[0].y)} and {_fmt(free_ends[1].x, free_ends[1].y)} "
            f"are {spread:.2f} apart"
        ),
        piece_indices=indices
    )


def validate_layout(pieces: Sequence[Piece]) -> ValidationResult:
    """
    Validate a whole layout, e.g. after import or paste.
    """
    if not pieces:
        return ValidationResult.valid()

    errors = check_joints(pieces)

    for i, piece in enumerate(pieces):
        if not isinstance(piece, StraightPiece):
            continue
        for w in validate_straight_length(piece):
            errors.append(ValidationError(
                error_type="straight_length",
                message=f"Straight {i} at {_fmt(piece.x, piece.y)}: {w}",
                piece_indices=[i]
            ))

    open_shape = check_open_shape(pieces)
    if open_shape is not None:
        errors.append(open_shape)

    if errors:
        logger.debug("Layout of %d pieces has %d errors", len(pieces), len(errors))
    return ValidationResult.from_errors(errors)


def validate_placement(piece: Piece, existing_pieces: Sequence[Piece]) -> ValidationResult:
    """
    Gate for committing a single piece: it must not overlap the layout, and
    any joint it forms must let track flow.
    """
    errors = []
    if check_collision(piece, existing_pieces):
        errors.append(ValidationError(
            error_type="collision",
            message=f"{piece.type} at {_fmt(piece.x, piece.y)} overlaps an existing piece"
        ))

    for j, other in enumerate(existing_pieces):
        for c1 in get_connection_points(piece):
            for c2 in get_connection_points(other):
                if distance(c1.position, c2.position) > config.JOINED_DISTANCE:
                    continue
                if not validate_track_flow(piece, other, c1, c2):
                    errors.append(ValidationError(
                        error_type="track_flow",
                        message=(
                            f"Track cannot flow from {piece.type} at {_fmt(piece.x, piece.y)} "
                            f"into {other.type} {j} at {_fmt(other.x, other.y)}"
                        ),
                        piece_indices=[j]
                    ))

    return ValidationResult.from_errors(errors)
