"""
Flask JSON API over the snapping engine, for the layout editor front end.
"""

from flask import Flask, jsonify, request
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tracksnap import (
    check_collision,
    find_snap_position,
    get_connected_pieces,
    get_connection_points,
    validate_layout,
)
from tracksnap.config import DEFAULT_SNAP_DISTANCE
from tracksnap.parser import LayoutFormatError, parse_piece

app = Flask(__name__)


def get_payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise LayoutFormatError("Request body must be a JSON object")
    return data


def get_pieces(data: dict, key: str = "pieces") -> list:
    records = data.get(key, [])
    if not isinstance(records, list):
        raise LayoutFormatError(f"'{key}' must be an array")
    return [parse_piece(r) for r in records]


def get_number(data: dict, key: str, default, cast=float):
    value = data.get(key, default)
    if isinstance(value, bool):
        raise LayoutFormatError(f"'{key}' must be a number, got {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise LayoutFormatError(f"'{key}' must be a number, got {value!r}") from e


def point_to_dict(cp) -> dict:
    return {"x": cp.x, "y": cp.y, "angle": cp.angle, "type": cp.type}


@app.errorhandler(LayoutFormatError)
def handle_bad_layout(error):
    return jsonify({"error": str(error)}), 400


@app.route('/api/connection-points', methods=['POST'])
def api_connection_points():
    """Connection points of a single piece."""
    piece = parse_piece(get_payload().get("piece"))
    return jsonify({"points": [point_to_dict(cp) for cp in get_connection_points(piece)]})


@app.route('/api/snap', methods=['POST'])
def api_snap():
    """Snap preview for a piece being placed or dragged."""
    data = get_payload()
    piece = parse_piece(data.get("piece"))
    others = get_pieces(data)
    snap_distance = get_number(data, "snapDistance", DEFAULT_SNAP_DISTANCE)

    snap = find_snap_position(piece, others, snap_distance)
    if snap is None:
        return jsonify({"snap": None})

    return jsonify({"snap": {
        "position": {"x": snap.position[0], "y": snap.position[1]},
        "rotation": snap.rotation,
        "flipped": snap.flipped,
    }})


@app.route('/api/collision', methods=['POST'])
def api_collision():
    """Would committing this piece overlap the layout?"""
    data = get_payload()
    piece = parse_piece(data.get("piece"))
    return jsonify({"collision": check_collision(piece, get_pieces(data))})


@app.route('/api/connected', methods=['POST'])
def api_connected():
    """Indices of the group joined to an anchor piece, for group drags."""
    data = get_payload()
    pieces = get_pieces(data)
    anchor = get_number(data, "anchor", 0, cast=int)
    return jsonify({"indices": get_connected_pieces(anchor, pieces)})


@app.route('/api/validate', methods=['POST'])
def api_validate():
    """Validate a whole layout on import or paste."""
    result = validate_layout(get_pieces(get_payload()))
    return jsonify(result.to_dict())


if __name__ == '__main__':
    print("Starting track snapping API...")
    print("Listening on http://localhost:5000")
    app.run(debug=True, port=5000)
