from __future__ import annotations

from typing import List

import pytest

from fmspy.constants import LEG_TYPE, ALTITUDE_CONSTRAINT, FLIGHT_PHASE, LATERAL_MODE, VERTICAL_MODE
from fmspy.airspace import (Fix, Airport, Runway, ProcedureLeg, ProcedureTransition, SID, STAR, APPCH,
                            AltitudeConstraint, StaticNavigationDatabase)
from fmspy.aircraft import AircraftPerformance
from fmspy.flightplan import FlightPlan, FlightPlanLeg, FlightPlanService
from fmspy.guidance.lnav import Geometry, IFLeg, TFLeg, TransitionPicker
from fmspy.guidance.vnav import VerticalProfileComputationParameters, VerticalProfileComputationParametersObserver


# All fixes on the equator, one degree of longitude is about 60 NM.
FIXES = {
    "D1": Fix("D1", 0.0, 0.1),
    "WPT0": Fix("WPT0", 0.0, 0.2),
    "WPT1": Fix("WPT1", 0.0, 1.2),
    "WPT2": Fix("WPT2", 0.0, 2.2),
    "WPT3": Fix("WPT3", 0.0, 3.2),
    "FF27": Fix("FF27", 0.0, 3.4),
}


def _makeNavdb() -> StaticNavigationDatabase:
    departure = SID("DEP1",
                    legs=[ProcedureLeg(LEG_TYPE.IF, fix=FIXES["D1"]),
                          ProcedureLeg(LEG_TYPE.TF, fix=FIXES["WPT0"])],
                    runwayTransitions=[ProcedureTransition("09", [ProcedureLeg(LEG_TYPE.CA, course=90,
                                                                               altitudeConstraint=AltitudeConstraint(ALTITUDE_CONSTRAINT.AT_OR_ABOVE, 1500))])],
                    enrouteTransitions=[ProcedureTransition("WPT1", [ProcedureLeg(LEG_TYPE.IF, fix=FIXES["WPT0"]),
                                                                     ProcedureLeg(LEG_TYPE.TF, fix=FIXES["WPT1"])])])
    origin = Airport("AAAA", 0.0, 0.0, elevation=100,
                     runways=[Runway("09", "AAAA", 0.0, 0.01, 90, length=3000, elevation=100)],
                     departures=[departure])

    arrival = STAR("ARR1",
                   legs=[ProcedureLeg(LEG_TYPE.IF, fix=FIXES["WPT1"]),
                         ProcedureLeg(LEG_TYPE.TF, fix=FIXES["WPT2"]),
                         ProcedureLeg(LEG_TYPE.TF, fix=FIXES["WPT3"])])
    approach = APPCH("R27", "27",
                     legs=[ProcedureLeg(LEG_TYPE.IF, fix=FIXES["WPT3"]),
                           ProcedureLeg(LEG_TYPE.TF, fix=FIXES["FF27"])],
                     missedApproachLegs=[ProcedureLeg(LEG_TYPE.CA, course=270,
                                                      altitudeConstraint=AltitudeConstraint(ALTITUDE_CONSTRAINT.AT_OR_ABOVE, 3000))])
    destination = Airport("BBBB", 0.0, 3.5, elevation=200,
                          runways=[Runway("27", "BBBB", 0.0, 3.51, 270, length=3000, elevation=200)],
                          arrivals=[arrival],
                          approaches=[approach])

    return StaticNavigationDatabase(airports=[origin, destination], fixes=list(FIXES.values()))


def legsInto(segment, idents: List[str], legType: LEG_TYPE = LEG_TYPE.TF) -> list:
    """Flight plan legs to the named fixes, attached to segment."""
    return [FlightPlanLeg.fromFix(segment, FIXES[i], legType=legType) for i in idents]


def straightGeometry(idents: List[str]) -> Geometry:
    """Geometry of an initial fix followed by track to fix legs through the named fixes."""
    fixes = [FIXES[i] for i in idents]
    legs = {0: IFLeg(fixes[0])}
    for i in range(1, len(fixes)):
        legs[i] = TFLeg(fixes[i - 1], fixes[i])
    transitions = {}
    for i in range(1, len(fixes)):
        transitions[i - 1] = TransitionPicker.forLegs(legs[i - 1], legs[i])
    return Geometry(legs, transitions)


@pytest.fixture
def navdb() -> StaticNavigationDatabase:
    return _makeNavdb()


@pytest.fixture
def flightPlan(navdb) -> FlightPlan:
    return FlightPlan(navdb=navdb)


@pytest.fixture
def flightPlanService(navdb) -> FlightPlanService:
    return FlightPlanService(navdb=navdb)


@pytest.fixture
def enrouteFlightPlanService(flightPlanService) -> FlightPlanService:
    """AAAA runway 09 to BBBB runway 27 through WPT0 to WPT3."""
    fp = flightPlanService.active
    fp.setOriginAirport("AAAA")
    fp.setOriginRunway("09")
    fp.setDestinationAirport("BBBB")
    fp.setDestinationRunway("27")
    fp.setEnrouteFixes([FIXES[i] for i in ["WPT0", "WPT1", "WPT2", "WPT3"]])
    return flightPlanService


@pytest.fixture(scope="session")
def performance() -> AircraftPerformance:
    return AircraftPerformance.find("A320")


@pytest.fixture
def observer(performance) -> VerticalProfileComputationParametersObserver:
    """Preflight A320, 60 t zero fuel weight, 10 t of fuel, cruise at 20000 ft, managed lateral navigation."""
    parameters = VerticalProfileComputationParameters(fuelOnBoard=10,
                                                      zeroFuelWeight=60,
                                                      flightPhase=FLIGHT_PHASE.PREFLIGHT,
                                                      cruiseAltitude=20000,
                                                      fcuAltitude=20000,
                                                      fcuLateralMode=LATERAL_MODE.NAV,
                                                      fcuVerticalMode=VERTICAL_MODE.CLB,
                                                      v2Speed=145,
                                                      thrustReductionAltitude=1600,
                                                      accelerationAltitude=1600,
                                                      originAirfieldElevation=100,
                                                      destinationAirfieldElevation=200)
    return VerticalProfileComputationParametersObserver(performance, parameters)
