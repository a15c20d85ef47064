#
import logging

from fmspy.constants import CHECKPOINT_REASON
from fmspy.utils import convert
from fmspy.aircraft import ACPERF
from fmspy.guidance.vnav.checkpoint import VerticalCheckpoint
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParametersObserver
from fmspy.guidance.vnav.predictions import Predictions, AtmosphericConditions
from fmspy.guidance.vnav.profile import BaseGeometryProfile

logger = logging.getLogger("TakeoffPathBuilder")


class TakeoffPathBuilder:
    """
    Takeoff roll, then climb at V2 + 10 at takeoff thrust to the thrust reduction altitude,
    and at climb thrust to the acceleration altitude.
    """
    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions

    def buildTakeoffPath(self, profile: BaseGeometryProfile):
        p = self.observer.get()
        perf = self.observer.performance
        fuelOnBoard = convert.tons_to_pounds(p.fuelOnBoard)
        grossWeight = convert.tons_to_pounds(p.zeroFuelWeight) + fuelOnBoard
        speed = p.v2Speed + 10

        # takeoff roll, ends at liftoff
        roll = convert.km_to_nm(perf.require(ACPERF.takeoff_distance) / 1000)
        rollTime = roll / (p.v2Speed / 2) * 3600
        rollFuel = perf.fuelFlow(ACPERF.fuel_flow_takeoff, grossWeight) * rollTime / 3600
        liftoff = VerticalCheckpoint(reason=CHECKPOINT_REASON.LIFTOFF,
                                     distanceFromStart=roll,
                                     altitude=p.originAirfieldElevation,
                                     speed=p.v2Speed,
                                     secondsFromPresent=rollTime,
                                     remainingFuelOnBoard=fuelOnBoard - rollFuel)
        profile.addCheckpoint(liftoff)

        thrustReduction = max(p.thrustReductionAltitude, p.originAirfieldElevation)
        step = Predictions.altitudeStep(liftoff.altitude,
                                        thrustReduction - liftoff.altitude,
                                        speed,
                                        None,
                                        perf.require(ACPERF.initial_climb_vspeed),
                                        perf.fuelFlow(ACPERF.fuel_flow_takeoff, grossWeight),
                                        self.atmosphericConditions.isaDeviation)
        profile.addCheckpointFromStep(step, CHECKPOINT_REASON.THRUST_REDUCTION_ALTITUDE)

        acceleration = max(p.accelerationAltitude, thrustReduction)
        last = profile.lastCheckpoint
        step = Predictions.altitudeStep(thrustReduction,
                                        acceleration - thrustReduction,
                                        speed,
                                        None,
                                        perf.climbVerticalSpeed(thrustReduction, convert.tons_to_pounds(p.zeroFuelWeight) + last.remainingFuelOnBoard),
                                        perf.fuelFlow(ACPERF.fuel_flow_climb, grossWeight),
                                        self.atmosphericConditions.isaDeviation)
        profile.addCheckpointFromStep(step, CHECKPOINT_REASON.ACCELERATION_ALTITUDE)

