"""
Flight plan elements: legs and discontinuities.
"""
from __future__ import annotations
import logging
import weakref

from fmspy.constants import LEG_TYPE, FIX_TERMINATED_LEGS, TURN_DIRECTION
from fmspy.airspace import Fix, ProcedureLeg, AltitudeConstraint, SpeedConstraint

logger = logging.getLogger("FlightPlanLeg")


class LegMetadata:
    """
    Guidance data attached to a leg, derived from its definition and from pilot entries.
    """
    def __init__(self, turnDirection: TURN_DIRECTION = TURN_DIRECTION.EITHER,
                 altitudeConstraint: AltitudeConstraint = None,
                 speedConstraint: SpeedConstraint = None,
                 rtaUtcSeconds: float = None,
                 isOverfly: bool = False,
                 offset: float = None):
        self.turnDirection = turnDirection
        self.altitudeConstraint = altitudeConstraint
        self.speedConstraint = speedConstraint
        self.rtaUtcSeconds = rtaUtcSeconds
        self.isOverfly = isOverfly
        self.offset = offset

    def key(self) -> tuple:
        return (self.turnDirection,
                self.altitudeConstraint.key() if self.altitudeConstraint is not None else None,
                self.speedConstraint.key() if self.speedConstraint is not None else None,
                self.rtaUtcSeconds,
                self.isOverfly,
                self.offset)


class FlightPlanElement:
    isDiscontinuity = False


class Discontinuity(FlightPlanElement):
    """
    Marks a lateral gap in the flight plan.
    """
    isDiscontinuity = True

    def __repr__(self):
        return "---F-PLN DISCONTINUITY---"


class FlightPlanLeg(FlightPlanElement):
    """
    A leg of the flight plan. The segment is held as a weak reference since segments own their legs.
    """
    def __init__(self, segment, definition: ProcedureLeg, ident: str = None, annotation: str = "", airwayIdent: str = None):
        self._segment = weakref.ref(segment) if segment is not None else None
        self.definition = definition
        self.ident = ident if ident is not None else definition.ident()
        self.annotation = annotation
        self.airwayIdent = airwayIdent
        self.rtaUtcSeconds = None
        self.offset = None

    @property
    def segment(self):
        return self._segment() if self._segment is not None else None

    def setSegment(self, segment):
        self._segment = weakref.ref(segment) if segment is not None else None

    @property
    def type(self) -> LEG_TYPE:
        return self.definition.type

    def isXf(self) -> bool:
        """
        Whether the leg terminates at a fix.
        """
        return self.type in FIX_TERMINATED_LEGS

    def terminationFix(self) -> Fix | None:
        if self.isXf():
            return self.definition.fix
        return None

    def terminatesWithFix(self, fix: Fix) -> bool:
        tf = self.terminationFix()
        return tf is not None and fix is not None and tf.isSameFix(fix)

    def metadata(self) -> LegMetadata:
        return LegMetadata(turnDirection=self.definition.turnDirection,
                           altitudeConstraint=self.definition.altitudeConstraint,
                           speedConstraint=self.definition.speedConstraint,
                           rtaUtcSeconds=self.rtaUtcSeconds,
                           isOverfly=self.definition.overfly,
                           offset=self.offset)

    def clone(self, segment) -> FlightPlanLeg:
        leg = FlightPlanLeg(segment, self.definition, ident=self.ident, annotation=self.annotation, airwayIdent=self.airwayIdent)
        leg.rtaUtcSeconds = self.rtaUtcSeconds
        leg.offset = self.offset
        return leg

    @staticmethod
    def fromProcedureLeg(segment, definition: ProcedureLeg, procedureIdent: str = "") -> FlightPlanLeg:
        return FlightPlanLeg(segment, definition, annotation=procedureIdent)

    @staticmethod
    def fromFix(segment, fix: Fix, legType: LEG_TYPE = LEG_TYPE.TF, airwayIdent: str = None) -> FlightPlanLeg:
        return FlightPlanLeg(segment, ProcedureLeg(legType, fix=fix), airwayIdent=airwayIdent)

    @staticmethod
    def fromAirportAndRunway(segment, airport, runway=None) -> FlightPlanLeg:
        """
        Initial fix leg at the runway threshold, or at the airport reference point when no runway is selected.
        """
        if runway is not None:
            return FlightPlanLeg(segment, ProcedureLeg(LEG_TYPE.IF, fix=runway), ident=f"{airport.ident}{runway.ident}")
        return FlightPlanLeg(segment, ProcedureLeg(LEG_TYPE.IF, fix=airport), ident=airport.ident)

    def __repr__(self):
        s = f"{self.type.value} {self.ident}"
        if self.annotation:
            s = s + f" ({self.annotation})"
        return s
