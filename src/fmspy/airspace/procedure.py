"""
Resolved terminal procedures: Standard Instrument Departures, Standard Terminal Arrival Routes and Approaches.
Procedures are supplied by the navigation database collaborator with their fixes already resolved.
"""
from __future__ import annotations
import logging
from typing import List

from fmspy.constants import LEG_TYPE, PROC_TYPE, TURN_DIRECTION
from fmspy.airspace.fix import Fix
from fmspy.airspace.constraint import AltitudeConstraint, SpeedConstraint

logger = logging.getLogger("Procedure")


class ProcedureLeg:
    """
    One leg of a procedure, as coded in the navigation database.
    Courses are in degrees, rho in nautical miles, theta is the boundary radial from the recommended navaid.
    """
    def __init__(self, legType: LEG_TYPE,
                 fix: Fix = None,
                 course: float = None,
                 altitudeConstraint: AltitudeConstraint = None,
                 speedConstraint: SpeedConstraint = None,
                 turnDirection: TURN_DIRECTION = TURN_DIRECTION.EITHER,
                 overfly: bool = False,
                 recommendedNavaid: Fix = None,
                 rho: float = None,
                 theta: float = None):
        self.type = legType
        self.fix = fix
        self.course = course
        self.altitudeConstraint = altitudeConstraint
        self.speedConstraint = speedConstraint
        self.turnDirection = turnDirection
        self.overfly = overfly
        self.recommendedNavaid = recommendedNavaid
        self.rho = rho
        self.theta = theta

    def ident(self) -> str:
        if self.fix is not None:
            return self.fix.ident
        if self.type in [LEG_TYPE.CA, LEG_TYPE.FA, LEG_TYPE.VA] and self.altitudeConstraint is not None:
            return str(round(self.altitudeConstraint.altitude1))
        if self.course is not None:
            return f"{round(self.course):03d}"
        return self.type.value

    def __repr__(self):
        return f"ProcedureLeg({self.type.value} {self.ident()})"


class ProcedureTransition:
    """
    A named list of legs attached to a procedure, either a runway transition or an enroute transition.
    """
    def __init__(self, ident: str, legs: List[ProcedureLeg] = None):
        self.ident = ident
        self.legs = legs if legs is not None else []

    def __repr__(self):
        return f"ProcedureTransition({self.ident}, {len(self.legs)} legs)"


class Procedure:
    """
    A Procedure is a named sequence of common legs with optional runway and enroute transitions.
    """
    procType = None

    def __init__(self, ident: str,
                 legs: List[ProcedureLeg] = None,
                 runwayTransitions: List[ProcedureTransition] = None,
                 enrouteTransitions: List[ProcedureTransition] = None):
        self.ident = ident
        self.legs = legs if legs is not None else []
        self.runwayTransitions = runwayTransitions if runwayTransitions is not None else []
        self.enrouteTransitions = enrouteTransitions if enrouteTransitions is not None else []

    def getRunwayTransition(self, runway: str) -> ProcedureTransition | None:
        for t in self.runwayTransitions:
            if t.ident == runway:
                return t
        logger.debug(f":getRunwayTransition: {type(self).__name__} {self.ident} has no transition for runway {runway}")
        return None

    def getEnrouteTransition(self, ident: str) -> ProcedureTransition | None:
        for t in self.enrouteTransitions:
            if t.ident == ident:
                return t
        return None

    def __repr__(self):
        return f"{type(self).__name__}({self.ident})"


class SID(Procedure):
    """
    A Standard Instrument Departure is a special instance of a Procedure.
    Runway transitions lead from the runway to the common part.
    """
    procType = PROC_TYPE.SID


class STAR(Procedure):
    """
    A Standard Terminal Arrival Route is a special instance of a Procedure.
    Enroute transitions lead to the common part, runway transitions lead to the approach.
    """
    procType = PROC_TYPE.STAR


class APPCH(Procedure):
    """
    An approach to a runway, with approach vias (entry transitions) and missed approach legs.
    """
    procType = PROC_TYPE.APPCH

    def __init__(self, ident: str,
                 runway: str,
                 legs: List[ProcedureLeg] = None,
                 vias: List[ProcedureTransition] = None,
                 missedApproachLegs: List[ProcedureLeg] = None):
        Procedure.__init__(self, ident, legs=legs, enrouteTransitions=vias)
        self.runway = runway
        self.missedApproachLegs = missedApproachLegs if missedApproachLegs is not None else []

    @property
    def vias(self) -> List[ProcedureTransition]:
        return self.enrouteTransitions

    def getVia(self, ident: str) -> ProcedureTransition | None:
        return self.getEnrouteTransition(ident)
