from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Union

from tracksnap.geometry import normalize_angle

STRAIGHT = "straight"
CURVE = "curve"


@dataclass(frozen=True)
class StraightPiece:
    x: float
    y: float
    rotation: float = 0.0

    family: ClassVar[str] = STRAIGHT
    type: ClassVar[str] = "straight"

    @property
    def flipped(self) -> bool:
        # A straight is symmetric about its own axis
        return False


@dataclass(frozen=True)
class CurvePiece:
    x: float
    y: float
    rotation: float = 0.0
    flipped: bool = False

    family: ClassVar[str] = CURVE
    type: ClassVar[str] = "curve"


@dataclass(frozen=True)
class SwitchPiece:
    """
    A turnout: one entry, a through exit and a diverging exit.
    Snaps like a curve; the diverging leg bends left or right by `hand`.
    """
    x: float
    y: float
    rotation: float = 0.0
    hand: str = "left"
    flipped: bool = False

    family: ClassVar[str] = CURVE

    def __post_init__(self):
        if self.hand not in ("left", "right"):
            raise ValueError(f"Switch hand must be 'left' or 'right', got {self.hand!r}")

    @property
    def type(self) -> str:
        return f"switch-{self.hand}"


Piece = Union[StraightPiece, CurvePiece, SwitchPiece]

PIECE_TYPES = ("straight", "curve", "switch-left", "switch-right")


def make_piece(
    piece_type: str,
    x: float,
    y: float,
    rotation: float = 0.0,
    flipped: bool = False
) -> Piece:
    """Build the right variant for a persisted type name."""
    if piece_type == "straight":
        return StraightPiece(x, y, rotation)
    if piece_type == "curve":
        return CurvePiece(x, y, rotation, flipped)
    if piece_type == "switch-left":
        return SwitchPiece(x, y, rotation, "left", flipped)
    if piece_type == "switch-right":
        return SwitchPiece(x, y, rotation, "right", flipped)
    raise ValueError(f"Unknown track piece type: {piece_type}")


def with_pose(
    piece: Piece,
    x: Optional[float] = None,
    y: Optional[float] = None,
    rotation: Optional[float] = None,
    flipped: Optional[bool] = None
) -> Piece:
    """Return a copy of `piece` with any given pose fields replaced."""
    changes = {}
    if x is not None:
        changes["x"] = x
    if y is not None:
        changes["y"] = y
    if rotation is not None:
        changes["rotation"] = rotation
    if flipped is not None and not isinstance(piece, StraightPiece):
        changes["flipped"] = flipped
    return replace(piece, **changes)


def normalized(piece: Piece) -> Piece:
    return replace(piece, rotation=normalize_angle(piece.rotation))


def is_straight(piece: Piece) -> bool:
    return piece.family == STRAIGHT


def is_curve_family(piece: Piece) -> bool:
    return piece.family == CURVE
