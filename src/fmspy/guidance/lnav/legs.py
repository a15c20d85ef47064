"""
Geometric leg primitives of the lateral path.
A primitive is built from one flight plan leg and, depending on its type, from its neighbours.
Primitives compare equal when their normalized construction parameters are equal.
"""
from __future__ import annotations
import math
import logging

from geojson import LineString

from fmspy.constants import LEG_TYPE, TURN_DIRECTION
from fmspy.parameters import CA_LEG_FEET_PER_NM, CI_LEG_MAX_INTERCEPT_DISTANCE
from fmspy.airspace import Fix
from fmspy.flightplan.leg import LegMetadata
from fmspy.geo.turf import Feature, distance_nm, bearing, destination_nm
from fmspy.geo.utils import mk360, mk180, line_intersect

logger = logging.getLogger("Leg")


def fixKey(fix) -> tuple | None:
    return fix.key() if fix is not None else None


class Leg:
    """
    Base class of lateral leg primitives. Distances are in nautical miles, courses in degrees.
    """
    legType = None

    def __init__(self, metadata: LegMetadata = None, segmentType=None):
        self.metadata = metadata if metadata is not None else LegMetadata()
        self.segmentType = segmentType
        self.isNull = False

    @property
    def ident(self) -> str:
        return self.legType.value

    @property
    def terminationFix(self) -> Fix | None:
        return None

    @property
    def startPoint(self) -> Feature | None:
        return None

    @property
    def terminationPoint(self) -> Feature | None:
        return self.terminationFix

    @property
    def initialCourse(self) -> float | None:
        return None

    @property
    def outboundCourse(self) -> float | None:
        return self.initialCourse

    @property
    def distance(self) -> float:
        return 0

    def isXf(self) -> bool:
        return False

    def params(self) -> tuple:
        """
        Construction parameters specific to the leg type.
        """
        return ()

    def key(self) -> tuple:
        return (type(self).__name__, self.params(), self.metadata.key(), self.segmentType)

    def __eq__(self, other):
        return isinstance(other, Leg) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def getFeature(self) -> Feature | None:
        s = self.startPoint
        e = self.terminationPoint
        if s is None or e is None:
            return None
        return Feature(geometry=LineString([s["geometry"]["coordinates"], e["geometry"]["coordinates"]]),
                       properties={"ident": self.ident, "type": self.legType.value, "distance": round(self.distance, 2)})

    def __repr__(self):
        return f"{type(self).__name__}({self.ident})"


class XFLeg(Leg):
    """
    Leg terminating at a fix.
    """
    def __init__(self, fix: Fix, metadata: LegMetadata = None, segmentType=None):
        Leg.__init__(self, metadata, segmentType)
        self.fix = fix

    @property
    def ident(self) -> str:
        return self.fix.ident

    @property
    def terminationFix(self) -> Fix:
        return self.fix

    def isXf(self) -> bool:
        return True


class IFLeg(XFLeg):
    legType = LEG_TYPE.IF

    @property
    def startPoint(self) -> Feature:
        return self.fix

    def params(self) -> tuple:
        return (fixKey(self.fix),)


class TFLeg(XFLeg):
    legType = LEG_TYPE.TF

    def __init__(self, fromFix: Fix, toFix: Fix, metadata: LegMetadata = None, segmentType=None):
        XFLeg.__init__(self, toFix, metadata, segmentType)
        self.fromFix = fromFix

    @property
    def startPoint(self) -> Feature:
        return self.fromFix

    @property
    def initialCourse(self) -> float:
        return mk360(bearing(self.fromFix, self.fix))

    @property
    def outboundCourse(self) -> float:
        return mk360(bearing(self.fix, self.fromFix) + 180)

    @property
    def distance(self) -> float:
        return distance_nm(self.fromFix, self.fix)

    def params(self) -> tuple:
        return (fixKey(self.fromFix), fixKey(self.fix))


class CFLeg(XFLeg):
    legType = LEG_TYPE.CF

    def __init__(self, fix: Fix, course: float, previousFix: Fix = None, metadata: LegMetadata = None, segmentType=None):
        XFLeg.__init__(self, fix, metadata, segmentType)
        self.course = course
        self.previousFix = previousFix

    @property
    def startPoint(self) -> Feature:
        if self.previousFix is not None:
            return self.previousFix
        return destination_nm(self.fix, 5, mk360(self.course + 180))

    @property
    def initialCourse(self) -> float:
        return self.course

    @property
    def distance(self) -> float:
        return distance_nm(self.startPoint, self.fix)

    def params(self) -> tuple:
        return (fixKey(self.fix), self.course, fixKey(self.previousFix))


class DFLeg(XFLeg):
    legType = LEG_TYPE.DF

    def __init__(self, fix: Fix, previousFix: Fix = None, metadata: LegMetadata = None, segmentType=None):
        XFLeg.__init__(self, fix, metadata, segmentType)
        self.previousFix = previousFix

    @property
    def startPoint(self) -> Feature | None:
        return self.previousFix

    @property
    def initialCourse(self) -> float | None:
        if self.previousFix is None:
            return None
        return mk360(bearing(self.previousFix, self.fix))

    @property
    def distance(self) -> float:
        if self.previousFix is None:
            return 0
        return distance_nm(self.previousFix, self.fix)

    def params(self) -> tuple:
        return (fixKey(self.fix), fixKey(self.previousFix))


class AFLeg(XFLeg):
    """
    Arc to fix around a navaid. The arc starts on the boundary radial theta at rho nautical miles from the navaid.
    """
    legType = LEG_TYPE.AF

    def __init__(self, fix: Fix, navaid: Fix, rho: float, theta: float, course: float, metadata: LegMetadata = None, segmentType=None):
        XFLeg.__init__(self, fix, metadata, segmentType)
        self.navaid = navaid
        self.rho = rho
        self.theta = theta
        self.course = course

    @property
    def sweepAngle(self) -> float:
        # positive sweeps clockwise around the navaid
        return mk180(bearing(self.navaid, self.fix) - self.theta)

    @property
    def turnDirection(self) -> TURN_DIRECTION:
        return TURN_DIRECTION.RIGHT if self.sweepAngle > 0 else TURN_DIRECTION.LEFT

    @property
    def startPoint(self) -> Feature:
        return destination_nm(self.navaid, self.rho, self.theta)

    @property
    def initialCourse(self) -> float:
        return mk360(self.theta + (90 if self.sweepAngle > 0 else -90))

    @property
    def outboundCourse(self) -> float:
        return mk360(bearing(self.navaid, self.fix) + (90 if self.sweepAngle > 0 else -90))

    @property
    def distance(self) -> float:
        return self.rho * math.radians(abs(self.sweepAngle))

    def getFeature(self) -> Feature:
        steps = max(2, int(abs(self.sweepAngle) / 5))
        coords = []
        for i in range(steps + 1):
            p = destination_nm(self.navaid, self.rho, mk360(self.theta + self.sweepAngle * i / steps))
            coords.append(p["geometry"]["coordinates"])
        return Feature(geometry=LineString(coords),
                       properties={"ident": self.ident, "type": self.legType.value, "distance": round(self.distance, 2)})

    def params(self) -> tuple:
        return (fixKey(self.fix), fixKey(self.navaid), self.rho, self.theta, self.course)


class CALeg(Leg):
    """
    Course to altitude, also used for fix to altitude legs.
    The termination point is estimated from a standard climb gradient.
    """
    legType = LEG_TYPE.CA

    def __init__(self, course: float, altitude: float, previousFix: Fix = None, metadata: LegMetadata = None, segmentType=None):
        Leg.__init__(self, metadata, segmentType)
        self.course = course
        self.altitude = altitude
        self.previousFix = previousFix

    @property
    def ident(self) -> str:
        return str(round(self.altitude))

    @property
    def startPoint(self) -> Feature | None:
        return self.previousFix

    @property
    def initialCourse(self) -> float:
        return self.course

    @property
    def distance(self) -> float:
        elevation = getattr(self.previousFix, "elevation", 0) if self.previousFix is not None else 0
        return max(self.altitude - elevation, 0) / CA_LEG_FEET_PER_NM

    @property
    def terminationPoint(self) -> Feature | None:
        if self.previousFix is None:
            return None
        return destination_nm(self.previousFix, self.distance, self.course)

    def params(self) -> tuple:
        return (self.course, self.altitude, fixKey(self.previousFix))


class CILeg(Leg):
    """
    Course to intercept the next leg.
    """
    legType = LEG_TYPE.CI

    def __init__(self, course: float, nextLeg: Leg, previousFix: Fix = None, metadata: LegMetadata = None, segmentType=None):
        Leg.__init__(self, metadata, segmentType)
        self.course = course
        self.nextLeg = nextLeg
        self.previousFix = previousFix

    @property
    def ident(self) -> str:
        return f"INTCPT {self.nextLeg.ident}"

    @property
    def startPoint(self) -> Feature | None:
        return self.previousFix

    @property
    def initialCourse(self) -> float:
        return self.course

    @property
    def terminationPoint(self) -> Feature | None:
        if self.previousFix is None:
            return None
        target = self.nextLeg.terminationPoint
        nextCourse = self.nextLeg.initialCourse
        if target is None or nextCourse is None:
            return None
        p = line_intersect(self.previousFix, self.course, target, nextCourse)
        if p is None or distance_nm(self.previousFix, p) > CI_LEG_MAX_INTERCEPT_DISTANCE:
            logger.debug(f":terminationPoint: no intercept for {self}")
            return None
        return p

    @property
    def distance(self) -> float:
        p = self.terminationPoint
        if p is None:
            return 0
        return distance_nm(self.previousFix, p)

    def params(self) -> tuple:
        return (self.course, self.nextLeg.key(), fixKey(self.previousFix))
