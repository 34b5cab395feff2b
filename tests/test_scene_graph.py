import pytest
from tracksnap.scene_graph import SceneGraph, get_piece_bounds
from tracksnap.pieces import CurvePiece, StraightPiece

class TestSceneGraphUnits:
    def test_add_and_query_point(self):
        sg = SceneGraph()
        id1 = sg.add_piece(StraightPiece(0, 0))
        id2 = sg.add_piece(StraightPiece(100, 0))

        # Query near the first straight's end
        results = sg.query_point((2.05, 0), tolerance=0.1)
        assert id1 in results
        assert id2 not in results
        assert len(sg) == 2

    def test_query_box(self):
        sg = SceneGraph([StraightPiece(0, 0), CurvePiece(10, 10)])
        assert sg.query_box((-1, -1), (1, 1)) == [0]
        assert sg.query_box((-50, -50), (50, 50)) == [0, 1]
        assert sg.get_piece(1) == CurvePiece(10, 10)

    def test_bounds_cover_connection_points(self):
        min_x, min_y, max_x, max_y = get_piece_bounds(CurvePiece(0, 0))
        assert (min_x, max_x) == pytest.approx((-0.7612, 0), abs=1e-3)
        assert (min_y, max_y) == pytest.approx((0, 3.8268), abs=1e-3)
