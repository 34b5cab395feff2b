from typing import Iterable, List, Optional, Tuple

from rtree import index

from tracksnap.connections import get_connection_points
from tracksnap.pieces import Piece


def get_piece_bounds(piece: Piece) -> Tuple[float, float, float, float]:
    """
    Bounding box of a piece's centre and connection points,
    as (min_x, min_y, max_x, max_y).
    """
    xs = [piece.x]
    ys = [piece.y]
    for cp in get_connection_points(piece):
        xs.append(cp.x)
        ys.append(cp.y)
    return min(xs), min(ys), max(xs), max(ys)


class SceneGraph:
    """
    Pieces of a layout plus a 2D R-tree over their bounds, used as the
    broad phase for snapping, collision and connection scans.
    """

    def __init__(self, pieces: Optional[Iterable[Piece]] = None):
        self.pieces: List[Piece] = []
        self.index = index.Index()
        self._next_id = 0
        for piece in pieces or ():
            self.add_piece(piece)

    def add_piece(self, piece: Piece) -> int:
        """
        Add a piece to the scene graph and spatial index.
        Returns the internal ID, which is also its position in `pieces`.
        """
        pid = self._next_id
        self._next_id += 1

        self.pieces.append(piece)
        self.index.insert(pid, get_piece_bounds(piece))

        return pid

    def get_piece(self, pid: int) -> Piece:
        return self.pieces[pid]

    def query_box(self, min_pt: Tuple[float, float], max_pt: Tuple[float, float]) -> List[int]:
        """
        Find all pieces whose bounds intersect the given box.
        """
        return sorted(self.index.intersection((min_pt[0], min_pt[1], max_pt[0], max_pt[1])))

    def query_point(self, point: Tuple[float, float], tolerance: float = 0.1) -> List[int]:
        """
        Find all pieces whose bounds come within `tolerance` of a point.
        """
        p_min = (point[0] - tolerance, point[1] - tolerance)
        p_max = (point[0] + tolerance, point[1] + tolerance)
        return self.query_box(p_min, p_max)

    def __len__(self):
        return len(self.pieces)
