"""
Aircraft state and commanded targets consumed by the vertical profile computation.
"""
from __future__ import annotations
import logging

from fmspy.constants import FLIGHT_PHASE, LATERAL_MODE, VERTICAL_MODE, ARMED_LATERAL_MODE, ARMED_VERTICAL_MODE
from fmspy.parameters import CLIMB_SPEED_LIMIT, CLIMB_SPEED_LIMIT_ALTITUDE, DESCENT_SPEED_LIMIT, DESCENT_SPEED_LIMIT_ALTITUDE
from fmspy.aircraft import AircraftPerformance, ACPERF

logger = logging.getLogger("VerticalProfileComputationParameters")


class VerticalProfileComputationParameters:
    """
    Snapshot of the inputs of a profile computation.
    Altitudes in ft, speeds in kn, vertical speeds in ft/min, zero fuel weight in tons, fuel on board in tons.
    """
    def __init__(self, **kwargs):
        self.presentPosition = kwargs.get("presentPosition")  # altitude of the aircraft
        self.presentSpeed = kwargs.get("presentSpeed", 0)
        self.distanceToGoOnActiveLeg = kwargs.get("distanceToGoOnActiveLeg", 0)

        self.fuelOnBoard = kwargs.get("fuelOnBoard")
        self.zeroFuelWeight = kwargs.get("zeroFuelWeight")

        self.flightPhase = kwargs.get("flightPhase", FLIGHT_PHASE.PREFLIGHT)
        self.cruiseAltitude = kwargs.get("cruiseAltitude")

        self.fcuAltitude = kwargs.get("fcuAltitude", 0)
        self.fcuVerticalSpeed = kwargs.get("fcuVerticalSpeed", 0)
        self.fcuSpeed = kwargs.get("fcuSpeed", -1)  # -1 when managed
        self.fcuLateralMode = kwargs.get("fcuLateralMode", LATERAL_MODE.NONE)
        self.fcuVerticalMode = kwargs.get("fcuVerticalMode", VERTICAL_MODE.NONE)
        self.fcuArmedLateralMode = kwargs.get("fcuArmedLateralMode", ARMED_LATERAL_MODE.NONE)
        self.fcuArmedVerticalMode = kwargs.get("fcuArmedVerticalMode", ARMED_VERTICAL_MODE.NONE)

        self.managedClimbSpeed = kwargs.get("managedClimbSpeed")
        self.managedClimbSpeedMach = kwargs.get("managedClimbSpeedMach")
        self.managedCruiseSpeed = kwargs.get("managedCruiseSpeed")
        self.managedCruiseSpeedMach = kwargs.get("managedCruiseSpeedMach")
        self.managedDescentSpeed = kwargs.get("managedDescentSpeed")
        self.managedDescentSpeedMach = kwargs.get("managedDescentSpeedMach")
        self.approachSpeed = kwargs.get("approachSpeed")
        self.greenDotSpeed = kwargs.get("greenDotSpeed")

        self.climbSpeedLimit = kwargs.get("climbSpeedLimit", CLIMB_SPEED_LIMIT)
        self.climbSpeedLimitAltitude = kwargs.get("climbSpeedLimitAltitude", CLIMB_SPEED_LIMIT_ALTITUDE)
        self.descentSpeedLimit = kwargs.get("descentSpeedLimit", DESCENT_SPEED_LIMIT)
        self.descentSpeedLimitAltitude = kwargs.get("descentSpeedLimitAltitude", DESCENT_SPEED_LIMIT_ALTITUDE)

        self.v2Speed = kwargs.get("v2Speed")
        self.thrustReductionAltitude = kwargs.get("thrustReductionAltitude")
        self.accelerationAltitude = kwargs.get("accelerationAltitude")
        self.originAirfieldElevation = kwargs.get("originAirfieldElevation", 0)
        self.destinationAirfieldElevation = kwargs.get("destinationAirfieldElevation", 0)
        self.isaDeviation = kwargs.get("isaDeviation", 0)

    def missing(self) -> list:
        """
        Names of the mandatory values not set.
        """
        mandatory = ["fuelOnBoard", "zeroFuelWeight", "cruiseAltitude", "v2Speed",
                     "thrustReductionAltitude", "accelerationAltitude",
                     "managedClimbSpeed", "managedCruiseSpeed", "managedDescentSpeed"]
        return [m for m in mandatory if getattr(self, m) is None]

    def __repr__(self):
        return f"VerticalProfileComputationParameters(phase={self.flightPhase.name}, crz={self.cruiseAltitude}, fob={self.fuelOnBoard})"


class VerticalProfileComputationParametersObserver:
    """
    Holds the current computation parameters and the aircraft performance model.
    Collaborators push new aircraft state with update().
    """
    def __init__(self, performance: AircraftPerformance, parameters: VerticalProfileComputationParameters = None):
        self.performance = performance
        self.parameters = parameters if parameters is not None else VerticalProfileComputationParameters()
        self.fillDefaults()

    def fillDefaults(self):
        """
        Completes unset managed speeds from the performance data.
        """
        p = self.parameters
        if p.managedClimbSpeed is None:
            p.managedClimbSpeed = self.performance.get(ACPERF.climbFL240_speed)
        if p.managedClimbSpeedMach is None:
            p.managedClimbSpeedMach = self.performance.get(ACPERF.climbmach_mach)
        if p.managedCruiseSpeed is None:
            p.managedCruiseSpeed = self.performance.get(ACPERF.cruise_speed)
        if p.managedCruiseSpeedMach is None:
            p.managedCruiseSpeedMach = self.performance.get(ACPERF.cruise_mach)
        if p.managedDescentSpeed is None:
            p.managedDescentSpeed = self.performance.get(ACPERF.descentFL100_speed)
        if p.managedDescentSpeedMach is None:
            p.managedDescentSpeedMach = self.performance.get(ACPERF.descentFL240_mach)
        if p.approachSpeed is None:
            p.approachSpeed = self.performance.get(ACPERF.landing_speed)
        if p.greenDotSpeed is None:
            p.greenDotSpeed = self.performance.get(ACPERF.green_dot_speed)

    def update(self, **kwargs):
        for k, v in kwargs.items():
            if not hasattr(self.parameters, k):
                logger.warning(f":update: unknown parameter {k}")
                continue
            setattr(self.parameters, k, v)

    def get(self) -> VerticalProfileComputationParameters:
        return self.parameters

    def canComputeProfile(self) -> bool:
        missing = self.parameters.missing()
        if len(missing) > 0:
            logger.debug(f":canComputeProfile: missing {missing}")
            return False
        if self.parameters.flightPhase >= FLIGHT_PHASE.CLIMB and self.parameters.presentPosition is None:
            logger.debug(":canComputeProfile: no present position")
            return False
        return True
