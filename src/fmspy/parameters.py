"""
Application parameters for flight planning and guidance computation.
Values are module constants, override them before building plans or profiles.
"""
import os

DEVELOPMENT = False  # produces additional debug if True


# ######################
# File system-based Data
#
HOME_DIR = os.path.dirname(os.path.abspath(__file__))

# DATA is a database of *static* data, aircraft performances, etc. (read-only)
DATA_DIR = os.path.join(HOME_DIR, "data")

DEFAULT_AIRCRAFT = "A320"


# ######################
# Debug
#
DEBUG_FLIGHTPLAN = DEVELOPMENT  # logs plan after each structural change
DEBUG_GEOMETRY = DEVELOPMENT  # logs tabulated geometry after each build
DEBUG_PROFILE = DEVELOPMENT  # logs tabulated vertical profile after each build


# ######################
# Lateral guidance
#
# Number of transitions computed after the active leg, -1 computes them all
NUM_COMPUTED_TRANSITIONS_AFTER_ACTIVE = -1

TRANSITION_GROUND_SPEED = 250  # kn, used for turn radius in transitions
TRANSITION_MAX_BANK_ANGLE = 25  # deg
CA_LEG_FEET_PER_NM = 500  # assumed climb gradient to estimate course-to-altitude leg length
CI_LEG_MAX_INTERCEPT_DISTANCE = 100  # NM


# ######################
# Vertical guidance
#
CLIMB_SPEED_LIMIT = 250  # kn
CLIMB_SPEED_LIMIT_ALTITUDE = 10000  # ft
DESCENT_SPEED_LIMIT = 250  # kn
DESCENT_SPEED_LIMIT_ALTITUDE = 10000  # ft

CLIMB_ALTITUDE_STEP = 2000  # ft, climb path is built in slices of this height
DESCENT_ALTITUDE_STEP = 2000  # ft
DESCENT_VERTICAL_SPEED = -1000  # ft/min, used for step descents in cruise
GLIDE_PATH_ANGLE = 3.0  # deg
STABILIZATION_HEIGHT = 1000  # ft AGL, approach speed reached
LANDING_HEIGHT = 50  # ft AGL, threshold crossing height
DECEL_RATE = 0.5  # kn/s, deceleration rate in approach configurations
IDLE_N1 = 30  # %

# Cruise / descent convergence
DEFAULT_FUEL_AT_DESTINATION = 2300  # lbs
DEFAULT_TIME_AT_DESTINATION = 0  # s
CONVERGENCE_MAX_ITERATIONS = 4
CONVERGENCE_FUEL_TOLERANCE = 100  # lbs
CONVERGENCE_TIME_TOLERANCE = 1  # s

MIN_DECEL_DISTANCE = 5  # NM, shorter geometries cannot host a deceleration path
