import math
from tracksnap.layout import check_open_shape, validate_layout, validate_placement
from tracksnap.pieces import CurvePiece, StraightPiece

class TestValidateLayout:
    def test_straights_end_to_end(self, two_straights):
        result = validate_layout(two_straights)
        assert result.is_valid
        assert result.errors == []

    def test_empty_layout(self):
        assert validate_layout([]).is_valid

    def test_circle_of_curves(self, circle_of_curves):
        result = validate_layout(circle_of_curves)
        assert result.is_valid, result.messages

    def test_oval_loop(self, oval_loop):
        result = validate_layout(oval_loop)
        assert result.is_valid, result.messages

    def test_kinked_straights(self):
        result = validate_layout([StraightPiece(0, 0, 0), StraightPiece(2, 2, math.pi / 2)])
        assert not result.is_valid
        error_types = {e.error_type for e in result.errors}
        assert {"connection", "track_flow", "geometry"} <= error_types
        # Messages carry the joint coordinates
        assert any("(2.00, 0.00)" in m for m in result.messages)
        assert all(e.piece_indices == [0, 1] for e in result.errors)

    def test_unjoined_pieces_not_checked(self):
        result = validate_layout([StraightPiece(0, 0, 0), StraightPiece(0, 10, 1.0)])
        assert result.is_valid

    def test_to_dict(self, two_straights):
        assert validate_layout(two_straights).to_dict() == {"isValid": True, "errors": []}


class TestOpenShapeHeuristic:
    """
    Known narrow heuristic: only layouts of exactly one near-horizontal
    straight plus two opposed curves are examined.
    """

    def test_diverging_curves_flagged(self):
        pieces = [StraightPiece(0, 0, 0), CurvePiece(2, 0, 0), CurvePiece(-2, 0, math.pi)]
        error = check_open_shape(pieces)
        assert error is not None
        assert error.error_type == "open_shape"
        assert sorted(error.piece_indices) == [0, 1, 2]
        assert "open_shape" in {e.error_type for e in validate_layout(pieces).errors}

    def test_converging_curves_not_flagged(self):
        pieces = [StraightPiece(0, 0, 0), CurvePiece(2, 0, math.pi / 2), CurvePiece(-2, 0, 3 * math.pi / 2)]
        assert check_open_shape(pieces) is None

    def test_other_piece_counts_ignored(self):
        pieces = [StraightPiece(0, 0, 0), CurvePiece(2, 0, 0), CurvePiece(-2, 0, math.pi), StraightPiece(50, 50)]
        assert check_open_shape(pieces) is None

    def test_curves_must_sit_on_the_straight(self):
        pieces = [StraightPiece(0, 0, 0), CurvePiece(12, 0, 0), CurvePiece(-12, 0, math.pi)]
        assert check_open_shape(pieces) is None


class TestValidatePlacement:
    def test_clean_placement(self, two_straights):
        assert validate_placement(StraightPiece(8, 0, 0), two_straights).is_valid

    def test_overlapping_placement(self, two_straights):
        result = validate_placement(StraightPiece(1, 0, 0), two_straights)
        assert not result.is_valid
        assert result.errors[0].error_type == "collision"

    def test_joint_without_flow(self):
        result = validate_placement(StraightPiece(2, 2, math.pi / 2), [StraightPiece(0, 0, 0)])
        assert [e.error_type for e in result.errors] == ["track_flow"]
