# Application constants related to flight planning and guidance
#
from enum import Enum, IntEnum, Flag, auto


########################################
# Flight plan structure
#
class SEGMENT_CLASS(Enum):
    ORIGIN = "origin"
    DEPARTURE = "departure"
    ENROUTE = "enroute"
    ARRIVAL = "arrival"
    APPROACH = "approach"
    DESTINATION = "destination"
    MISSED_APPROACH = "missed-approach"


DEPARTURE_CLASSES = [SEGMENT_CLASS.DEPARTURE]
ARRIVAL_CLASSES = [SEGMENT_CLASS.ARRIVAL, SEGMENT_CLASS.APPROACH]


class SEGMENT_TYPE(Enum):
    ORIGIN = "origin"
    DEPARTURE_RUNWAY_TRANSITION = "departure-runway-transition"
    DEPARTURE = "departure"
    DEPARTURE_ENROUTE_TRANSITION = "departure-enroute-transition"
    ENROUTE = "enroute"
    ARRIVAL_ENROUTE_TRANSITION = "arrival-enroute-transition"
    ARRIVAL = "arrival"
    ARRIVAL_RUNWAY_TRANSITION = "arrival-runway-transition"
    APPROACH_VIA = "approach-via"
    APPROACH = "approach"
    DESTINATION = "destination"
    MISSED_APPROACH = "missed-approach"


# Annotations set on legs moved into the enroute segment by truncation
TRUNC_DEPARTURE = "TRUNC D"
TRUNC_ARRIVAL = "TRUNC A"


class PROC_TYPE(Enum):
    SID = "SID"
    STAR = "STAR"
    APPCH = "APPCH"


########################################
# ARINC 424 path terminators
#
class LEG_TYPE(Enum):
    AF = "AF"  # arc to fix (DME arc)
    CA = "CA"  # course to altitude
    CD = "CD"  # course to DME distance
    CF = "CF"  # course to fix
    CI = "CI"  # course to intercept
    CR = "CR"  # course to radial
    DF = "DF"  # direct to fix
    FA = "FA"  # fix to altitude
    FC = "FC"  # track from fix for a distance
    FD = "FD"  # track from fix to DME distance
    FM = "FM"  # from fix to manual termination
    HA = "HA"  # hold to altitude
    HF = "HF"  # hold, single circuit
    HM = "HM"  # hold to manual termination
    IF = "IF"  # initial fix
    PI = "PI"  # procedure turn
    RF = "RF"  # constant radius arc
    TF = "TF"  # track to fix
    VA = "VA"  # heading to altitude
    VD = "VD"  # heading to DME distance
    VI = "VI"  # heading to intercept
    VM = "VM"  # heading to manual termination
    VR = "VR"  # heading to radial


FIX_TERMINATED_LEGS = [LEG_TYPE.AF, LEG_TYPE.CF, LEG_TYPE.IF, LEG_TYPE.DF, LEG_TYPE.RF, LEG_TYPE.TF]
MANUAL_TERMINATION_LEGS = [LEG_TYPE.FM, LEG_TYPE.VM]
# Legs that need the following geometry leg to be built first
FORWARD_DEPENDENT_LEGS = [LEG_TYPE.CI, LEG_TYPE.VI]


########################################
# Constraints and leg metadata
#
class ALTITUDE_CONSTRAINT(Enum):
    AT = "at"
    AT_OR_ABOVE = "at-or-above"
    AT_OR_BELOW = "at-or-below"
    RANGE = "range"


class SPEED_CONSTRAINT(Enum):
    AT = "at"
    AT_OR_ABOVE = "at-or-above"
    AT_OR_BELOW = "at-or-below"


class TURN_DIRECTION(Enum):
    EITHER = "either"
    LEFT = "left"
    RIGHT = "right"


########################################
# Flight phases and guidance modes
#
class FLIGHT_PHASE(IntEnum):
    PREFLIGHT = 0
    TAKEOFF = 1
    CLIMB = 2
    CRUISE = 3
    DESCENT = 4
    APPROACH = 5
    GOAROUND = 6
    DONE = 7


class LATERAL_MODE(Enum):
    NONE = "none"
    HDG = "hdg"
    TRACK = "track"
    NAV = "nav"
    LOC_CPT = "loc-cpt"
    LOC_TRACK = "loc-track"
    RWY = "rwy"
    GA_TRACK = "ga-track"


class VERTICAL_MODE(Enum):
    NONE = "none"
    SRS = "srs"
    CLB = "clb"
    OP_CLB = "op-clb"
    DES = "des"
    OP_DES = "op-des"
    VS = "vs"
    FPA = "fpa"
    ALT = "alt"
    ALT_CPT = "alt-cpt"
    ALT_CST = "alt-cst"
    ALT_CST_CPT = "alt-cst-cpt"
    GS_CPT = "gs-cpt"
    GS_TRACK = "gs-track"
    FINAL = "final"


class ARMED_LATERAL_MODE(Flag):
    NONE = 0
    NAV = auto()
    LOC = auto()


class ARMED_VERTICAL_MODE(Flag):
    NONE = 0
    ALT = auto()
    ALT_CST = auto()
    CLB = auto()
    DES = auto()
    GS = auto()
    FINAL = auto()


# Vertical modes in which altitude constraints are honoured
ALTITUDE_CONSTRAINT_MODES = [VERTICAL_MODE.CLB,
                             VERTICAL_MODE.ALT,
                             VERTICAL_MODE.ALT_CPT,
                             VERTICAL_MODE.ALT_CST_CPT,
                             VERTICAL_MODE.ALT_CST,
                             VERTICAL_MODE.DES]


class FLAPS(IntEnum):
    CLEAN = 0
    CONF1 = 1
    CONF2 = 2
    CONF3 = 3
    FULL = 4


########################################
# Vertical profile
#
class CHECKPOINT_REASON(Enum):
    PRESENT_POSITION = "present-position"
    LIFTOFF = "liftoff"
    THRUST_REDUCTION_ALTITUDE = "thrust-reduction-altitude"
    ACCELERATION_ALTITUDE = "acceleration-altitude"
    ATMOSPHERIC_CONDITIONS = "atmospheric-conditions"
    CROSSING_CLIMB_SPEED_LIMIT = "crossing-climb-speed-limit"
    LEVEL_OFF_CLIMB_CONSTRAINT = "level-off-climb-constraint"
    CONTINUE_CLIMB = "continue-climb"
    CROSSING_FCU_ALTITUDE_CLIMB = "crossing-fcu-altitude-climb"
    TOP_OF_CLIMB = "top-of-climb"
    STEP_CLIMB = "step-climb"
    TOP_OF_STEP_CLIMB = "top-of-step-climb"
    STEP_DESCENT = "step-descent"
    BOTTOM_OF_STEP_DESCENT = "bottom-of-step-descent"
    TOP_OF_DESCENT = "top-of-descent"
    CROSSING_DESCENT_SPEED_LIMIT = "crossing-descent-speed-limit"
    LEVEL_OFF_DESCENT_CONSTRAINT = "level-off-descent-constraint"
    AT_ALTITUDE_CONSTRAINT = "at-altitude-constraint"
    CONTINUE_DESCENT = "continue-descent"
    CROSSING_FCU_ALTITUDE_DESCENT = "crossing-fcu-altitude-descent"
    DECEL = "decel"
    FLAPS1 = "flaps-1"
    FLAPS2 = "flaps-2"
    FLAPS3 = "flaps-3"
    FLAPS_FULL = "flaps-full"
    LANDING = "landing"
    TIME_MARKER = "time-marker"


# Tolerance when comparing distances along path, in nautical miles
DISTANCE_EPSILON = 1e-4


class MANAGED_SPEED_TYPE(Enum):
    CLIMB = "climb"
    CRUISE = "cruise"
    DESCENT = "descent"


# Constraints on legs of these segments are read as climb constraints
CLIMB_SEGMENT_TYPES = [SEGMENT_TYPE.ORIGIN,
                       SEGMENT_TYPE.DEPARTURE_RUNWAY_TRANSITION,
                       SEGMENT_TYPE.DEPARTURE,
                       SEGMENT_TYPE.DEPARTURE_ENROUTE_TRANSITION]

# Constraints on legs of these segments are read as descent constraints
DESCENT_SEGMENT_TYPES = [SEGMENT_TYPE.ARRIVAL_ENROUTE_TRANSITION,
                         SEGMENT_TYPE.ARRIVAL,
                         SEGMENT_TYPE.ARRIVAL_RUNWAY_TRANSITION,
                         SEGMENT_TYPE.APPROACH_VIA,
                         SEGMENT_TYPE.APPROACH,
                         SEGMENT_TYPE.DESTINATION]
