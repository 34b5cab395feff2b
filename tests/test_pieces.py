import math
import pytest
from tracksnap.pieces import CurvePiece, StraightPiece, SwitchPiece, make_piece, normalized, with_pose

class TestPieceVariants:
    def test_type_names(self):
        assert StraightPiece(0, 0).type == "straight"
        assert CurvePiece(0, 0).type == "curve"
        assert SwitchPiece(0, 0, hand="right").type == "switch-right"

    def test_switch_is_curve_family(self):
        assert SwitchPiece(0, 0).family == CurvePiece(0, 0).family == "curve"
        assert StraightPiece(0, 0).family == "straight"

    def test_switch_hand_checked(self):
        with pytest.raises(ValueError):
            SwitchPiece(0, 0, hand="middle")

    def test_make_piece(self):
        assert make_piece("switch-left", 1, 2, 0.5, True) == SwitchPiece(1, 2, 0.5, "left", True)
        with pytest.raises(ValueError):
            make_piece("crossing", 0, 0)

    def test_with_pose_returns_copy(self):
        curve = CurvePiece(0, 0, 0)
        moved = with_pose(curve, x=3, rotation=1.0, flipped=True)
        assert moved == CurvePiece(3, 0, 1.0, True)
        assert curve == CurvePiece(0, 0, 0)

    def test_straight_ignores_flip(self):
        straight = with_pose(StraightPiece(0, 0), flipped=True)
        assert straight.flipped is False

    def test_normalized(self):
        assert normalized(CurvePiece(0, 0, -math.pi / 2)).rotation == pytest.approx(3 * math.pi / 2)
        assert normalized(StraightPiece(0, 0, 4 * math.pi)).rotation == pytest.approx(0)
