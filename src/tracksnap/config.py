import math
import os

# Piece dimensions, in grid units
STRAIGHT_LENGTH = 4.0
CURVE_RADIUS = 10.0
CURVE_ANGLE_SPAN = math.pi / 8
SWITCH_LENGTH = 8.0

# Snap search
ROTATION_STEPS = 16
SNAP_ANGLE_TOLERANCE = math.radians(15)
MAX_SNAP_ADJUSTMENT = 0.5

# Default search radius for the editor's ghost piece, overridable per process
DEFAULT_SNAP_DISTANCE = float(os.environ.get("TRACKSNAP_SNAP_DISTANCE", "2.0"))

# Connection compatibility
CONNECT_DISTANCE = 0.3
CONNECT_ANGLE_TOLERANCE = math.radians(30)
STRICT_ANGLE_TOLERANCE = math.radians(7.5)
STRAIGHT_ROTATION_INCREMENT = math.pi / 2
CURVE_ROTATION_INCREMENT = math.pi / 8

# Overlap
STRAIGHT_MIN_SEPARATION = 3.5
CURVE_MIN_SEPARATION = 1.5
JOINED_DISTANCE = 0.1

# Layout-wide geometry checks
GEOMETRY_DISTANCE = 0.05
STRAIGHT_END_TOLERANCE = 0.1
STRAIGHT_PAIR_TOLERANCE = 0.2

# Track flow
PARALLEL_TOLERANCE = math.radians(15)
COMPASS_TOLERANCE = math.radians(30)
RELATIVE_ROTATION_TOLERANCE = math.radians(22.5)
# Slack for comparisons that land exactly on a tolerance boundary
ANGLE_EPSILON = 1e-9

# Open Y/T heuristic
OPEN_SHAPE_MAX_SPREAD = 6.0
HORIZONTAL_TOLERANCE = math.radians(10)
