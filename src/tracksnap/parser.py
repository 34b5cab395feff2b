import json
import math
from pathlib import Path
from typing import Any, List, Sequence

from tracksnap.pieces import Piece, StraightPiece, make_piece

# Older exports used camel case for switches
LEGACY_TYPE_NAMES = {
    "switchLeft": "switch-left",
    "switchRight": "switch-right",
}


class LayoutFormatError(ValueError):
    """A persisted layout record cannot be turned into a piece."""


def _number(record: dict, key: str) -> float:
    value = record.get(key)
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutFormatError(f"Invalid piece data: '{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise LayoutFormatError(f"Invalid piece data: '{key}' must be finite, got {value!r}")
    return float(value)


def parse_piece(record: Any) -> Piece:
    """
    Build a piece from one persisted record: x, y, type, rotation, flipped?
    A missing `flipped` means not flipped.
    """
    if not isinstance(record, dict):
        raise LayoutFormatError(f"Invalid piece data: expected an object, got {type(record).__name__}")

    piece_type = record.get("type")
    if not isinstance(piece_type, str):
        raise LayoutFormatError(f"Invalid piece data: missing or invalid type {piece_type!r}")
    piece_type = LEGACY_TYPE_NAMES.get(piece_type, piece_type)

    x = _number(record, "x")
    y = _number(record, "y")
    rotation = _number(record, "rotation")
    flipped = record.get("flipped", False)
    if flipped is None:
        flipped = False
    if not isinstance(flipped, bool):
        raise LayoutFormatError(f"Invalid piece data: 'flipped' must be a boolean, got {flipped!r}")

    try:
        return make_piece(piece_type, x, y, rotation, flipped)
    except ValueError as e:
        raise LayoutFormatError(str(e)) from e


def parse_layout(text: str) -> List[Piece]:
    """
    Parse a JSON layout: an ordered array of piece records.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LayoutFormatError(f"Invalid layout data: {e}") from e

    if not isinstance(data, list):
        raise LayoutFormatError("Invalid layout data: expected an array")

    return [parse_piece(record) for record in data]


def load_layout(file_path: Path) -> List[Piece]:
    return parse_layout(Path(file_path).read_text())


def piece_to_dict(piece: Piece) -> dict:
    record = {
        "x": piece.x,
        "y": piece.y,
        "type": piece.type,
        "rotation": piece.rotation,
    }
    if not isinstance(piece, StraightPiece):
        record["flipped"] = piece.flipped
    return record


def dump_layout(pieces: Sequence[Piece]) -> str:
    return json.dumps([piece_to_dict(p) for p in pieces], indent=2)
