from typing import Iterable, List, Sequence, Set, Tuple

from tracksnap import config
from tracksnap.connections import find_joined_pair
from tracksnap.geometry import distance
from tracksnap.pieces import Piece, is_straight
from tracksnap.scene_graph import SceneGraph


def min_separation(piece1: Piece, piece2: Piece) -> float:
    """Closest two piece centres may sit without a joint between them."""
    if is_straight(piece1) and is_straight(piece2):
        return config.STRAIGHT_MIN_SEPARATION
    return config.CURVE_MIN_SEPARATION


def would_overlap(piece1: Piece, piece2: Piece) -> bool:
    """
    True if the two pieces sit on top of each other.
    Pieces sharing a connection point are joined, never overlapping.
    """
    centre_gap = distance((piece1.x, piece1.y), (piece2.x, piece2.y))
    if centre_gap >= min_separation(piece1, piece2):
        return False
    return find_joined_pair(piece1, piece2) is None


def check_collision(piece: Piece, others: Iterable[Piece]) -> bool:
    """True if `piece` overlaps any of `others`."""
    return any(would_overlap(piece, other) for other in others)


def check_collisions(pieces: Sequence[Piece]) -> List[Tuple[int, int]]:
    """
    Check every pair of pieces in a layout for overlap.
    Returns a list of (index_a, index_b) tuples for colliding pairs.
    """
    sg = SceneGraph(pieces)
    collisions = []
    processed_pairs: Set[Tuple[int, int]] = set()
    reach = max(config.STRAIGHT_MIN_SEPARATION, config.CURVE_MIN_SEPARATION)

    for i, piece_a in enumerate(pieces):
        for j in sg.query_point((piece_a.x, piece_a.y), tolerance=reach):
            if i == j:
                continue

            pair = tuple(sorted((i, j)))
            if pair in processed_pairs:
                continue
            processed_pairs.add(pair)

            if would_overlap(piece_a, pieces[j]):
                collisions.append(pair)

    return sorted(collisions)
