import pytest
import json
import math
from pathlib import Path

from tracksnap.pieces import CurvePiece, StraightPiece
from tracksnap.parser import load_layout


@pytest.fixture
def test_data_dir() -> Path:
    return Path(__file__).parent.parent / "test_data"


@pytest.fixture
def manifest(test_data_dir) -> dict:
    manifest_path = test_data_dir / "manifest.json"
    return json.loads(manifest_path.read_text())


@pytest.fixture
def valid_cases(manifest, test_data_dir) -> list[tuple[dict, Path]]:
    """Returns list of (case_info, file_path) for valid test cases."""
    cases = []
    for case in manifest["test_cases"]:
        if case["expected_valid"]:
            cases.append((case, test_data_dir / case["file"]))
    return cases


@pytest.fixture
def invalid_cases(manifest, test_data_dir) -> list[tuple[dict, Path]]:
    """Returns list of (case_info, file_path) for invalid test cases."""
    cases = []
    for case in manifest["test_cases"]:
        if not case["expected_valid"]:
            cases.append((case, test_data_dir / case["file"]))
    return cases


@pytest.fixture
def two_straights() -> list:
    return [StraightPiece(0, 0, 0), StraightPiece(4, 0, 0)]


@pytest.fixture
def circle_of_curves() -> list:
    """16 curves closing a full circle around (-6, 2)."""
    pieces = []
    for i in range(16):
        angle = i * math.pi / 8
        pieces.append(CurvePiece(-6 + 10 * math.cos(angle), 2 + 10 * math.sin(angle), angle))
    return pieces


@pytest.fixture
def oval_loop(test_data_dir) -> list:
    return load_layout(test_data_dir / "valid" / "oval_loop.json")
