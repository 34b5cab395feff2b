from pathlib import Path

from .report import ValidationError, ValidationResult
from .pieces import CurvePiece, Piece, StraightPiece, SwitchPiece, make_piece, with_pose
from .connections import (
    ConnectionPoint,
    RotationFit,
    build_connection_graph,
    can_connect,
    can_connect_with_rotation,
    find_open_connections,
    get_connected_pieces,
    get_connection_indicators,
    get_connection_points,
    is_valid_connection_types,
)
from .collision import check_collision, check_collisions, would_overlap
from .checks import has_valid_geometry, is_reasonable_connection
from .track_flow import validate_track_flow
from .snapping import SnapResult, find_snap_position
from .layout import validate_layout, validate_placement
from .parser import LayoutFormatError, load_layout, parse_layout


def validate_layout_file(file_path: Path) -> ValidationResult:
    """
    Validate a saved layout file.
    """
    try:
        pieces = load_layout(file_path)
    except (OSError, LayoutFormatError) as e:
        return ValidationResult.invalid([
            ValidationError(error_type="parse_error", message=str(e))
        ])

    if not pieces:
        return ValidationResult.valid()

    result = validate_layout(pieces)
    errors = list(result.errors)

    # Joints are checked by validate_layout; stacked pieces are not
    for i, j in check_collisions(pieces):
        errors.append(ValidationError(
            error_type="collision",
            message=f"Collision between piece {i} and {j}",
            piece_indices=[i, j]
        ))

    return ValidationResult.from_errors(errors)
