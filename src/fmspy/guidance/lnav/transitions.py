"""
Turns joining consecutive leg primitives.
"""
from __future__ import annotations
import math
import logging

from fmspy.constants import LEG_TYPE, TURN_DIRECTION
from fmspy.parameters import TRANSITION_GROUND_SPEED, TRANSITION_MAX_BANK_ANGLE
from fmspy.geo.utils import courseChange, turnRadius, bankedTurnRadius
from fmspy.guidance.lnav.legs import Leg

logger = logging.getLogger("Transition")


class Transition:
    """
    Base class for transitions. Transitions are keyed on their class and on the keys of the legs they join.
    """
    def __init__(self, previousLeg: Leg, nextLeg: Leg):
        self.previousLeg = previousLeg
        self.nextLeg = nextLeg
        self.radius = turnRadius(TRANSITION_GROUND_SPEED)

    @property
    def courseChange(self) -> float:
        inbound = self.previousLeg.outboundCourse
        outbound = self.nextLeg.initialCourse
        if inbound is None or outbound is None:
            return 0
        return courseChange(inbound, outbound)

    @property
    def turnDirection(self) -> TURN_DIRECTION:
        forced = self.nextLeg.metadata.turnDirection
        if forced in [TURN_DIRECTION.LEFT, TURN_DIRECTION.RIGHT]:
            return forced
        return TURN_DIRECTION.RIGHT if self.courseChange >= 0 else TURN_DIRECTION.LEFT

    @property
    def turnAngle(self) -> float:
        """
        Absolute turn angle in degrees, taking a forced turn direction into account.
        """
        delta = self.courseChange
        if self.turnDirection == TURN_DIRECTION.RIGHT and delta < 0:
            delta = delta + 360
        elif self.turnDirection == TURN_DIRECTION.LEFT and delta > 0:
            delta = delta - 360
        return abs(delta)

    @property
    def distance(self) -> float:
        return self.radius * math.radians(self.turnAngle)

    def key(self) -> tuple:
        return (type(self).__name__, self.previousLeg.key(), self.nextLeg.key(), round(self.radius, 6))

    def __eq__(self, other):
        return isinstance(other, Transition) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return f"{type(self).__name__}({self.previousLeg.ident}->{self.nextLeg.ident}, {round(self.turnAngle)}°)"


class FixedRadiusTransition(Transition):
    """
    Fly-by turn between two fix terminated legs, at the bank angle limit.
    """
    def __init__(self, previousLeg: Leg, nextLeg: Leg):
        Transition.__init__(self, previousLeg, nextLeg)
        self.radius = bankedTurnRadius(TRANSITION_GROUND_SPEED, TRANSITION_MAX_BANK_ANGLE)

    @property
    def turnAnticipationDistance(self) -> float:
        a = self.turnAngle
        if a >= 180:
            return self.radius
        return self.radius * math.tan(math.radians(a / 2))


class PathCaptureTransition(Transition):
    """
    Turn to capture the next leg path after a floating termination or an overfly.
    """
    pass


class CourseCaptureTransition(Transition):
    """
    Turn to capture the course of a course leg.
    """
    pass


class DirectToFixTransition(Transition):
    """
    Turn towards a fix, the next leg course is defined at the end of the turn.
    """
    pass


class TransitionPicker:

    @staticmethod
    def forLegs(frm: Leg | None, to: Leg | None) -> Transition | None:
        if frm is None or to is None:
            return None
        if to.legType == LEG_TYPE.IF:
            return None
        if to.legType in [LEG_TYPE.CA, LEG_TYPE.CI]:
            return CourseCaptureTransition(frm, to)
        if frm.legType in [LEG_TYPE.CA, LEG_TYPE.CI] or frm.metadata.isOverfly:
            return PathCaptureTransition(frm, to)
        if to.legType == LEG_TYPE.DF:
            return DirectToFixTransition(frm, to)
        return FixedRadiusTransition(frm, to)
