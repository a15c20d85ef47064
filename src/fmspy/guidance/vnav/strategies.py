"""
Climb and descent strategies: how the aircraft changes altitude, and what it costs.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod

from fmspy.parameters import IDLE_N1, DECEL_RATE
from fmspy.utils import convert
from fmspy.aircraft import ACPERF
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParametersObserver
from fmspy.guidance.vnav.predictions import Predictions, StepResults, AtmosphericConditions

logger = logging.getLogger("Strategy")


class Strategy(ABC):

    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions

    @property
    def performance(self):
        return self.observer.performance

    def grossWeight(self, fuelOnBoard: float) -> float:
        """
        Gross weight in lbs for the remaining fuel on board in lbs.
        """
        zfw = self.observer.get().zeroFuelWeight
        return convert.tons_to_pounds(zfw if zfw is not None else 0) + fuelOnBoard

    @abstractmethod
    def verticalSpeed(self, altitude: float, fuelOnBoard: float) -> float:
        """
        Signed vertical speed in ft/min at altitude.
        """

    @abstractmethod
    def fuelFlow(self, fuelOnBoard: float) -> float:
        """
        Fuel flow in lbs/h.
        """

    def predictToAltitude(self, initialAltitude: float, finalAltitude: float, speed: float, mach: float, fuelOnBoard: float) -> StepResults:
        midwayAltitude = (initialAltitude + finalAltitude) / 2
        return Predictions.altitudeStep(initialAltitude,
                                        finalAltitude - initialAltitude,
                                        speed,
                                        mach,
                                        self.verticalSpeed(midwayAltitude, fuelOnBoard),
                                        self.fuelFlow(fuelOnBoard),
                                        self.atmosphericConditions.isaDeviation)

    def predictToDistance(self, initialAltitude: float, distance: float, speed: float, mach: float, fuelOnBoard: float) -> StepResults:
        return Predictions.distanceStep(initialAltitude,
                                        distance,
                                        speed,
                                        mach,
                                        self.verticalSpeed(initialAltitude, fuelOnBoard),
                                        self.fuelFlow(fuelOnBoard),
                                        self.atmosphericConditions.isaDeviation)

    def predictToSpeed(self, initialAltitude: float, speed: float, finalSpeed: float, mach: float, fuelOnBoard: float) -> StepResults:
        return Predictions.speedChangeStep(initialAltitude,
                                           speed,
                                           finalSpeed,
                                           mach,
                                           self.verticalSpeed(initialAltitude, fuelOnBoard),
                                           self.fuelFlow(fuelOnBoard),
                                           DECEL_RATE,
                                           self.atmosphericConditions.isaDeviation)


class ClimbStrategy(Strategy):
    pass


class DescentStrategy(Strategy):
    """
    Descent strategies can also be computed backwards, from the end of the segment.
    """
    def predictToDistanceBackwards(self, finalAltitude: float, distance: float, speed: float, mach: float, fuelOnBoard: float) -> StepResults:
        return Predictions.reverseDistanceStep(finalAltitude,
                                               distance,
                                               speed,
                                               mach,
                                               self.verticalSpeed(finalAltitude, fuelOnBoard),
                                               self.fuelFlow(fuelOnBoard),
                                               self.atmosphericConditions.isaDeviation)

    def predictToSpeedBackwards(self, finalAltitude: float, finalSpeed: float, speed: float, mach: float, fuelOnBoard: float) -> StepResults:
        return Predictions.reverseSpeedChangeStep(finalAltitude,
                                                  speed,
                                                  finalSpeed,
                                                  mach,
                                                  self.verticalSpeed(finalAltitude, fuelOnBoard),
                                                  self.fuelFlow(fuelOnBoard),
                                                  DECEL_RATE,
                                                  self.atmosphericConditions.isaDeviation)


class ClimbThrustClimbStrategy(ClimbStrategy):
    """
    Climb at climb thrust, vertical speed results from aircraft performance and weight.
    """
    def verticalSpeed(self, altitude: float, fuelOnBoard: float) -> float:
        return self.performance.climbVerticalSpeed(altitude, self.grossWeight(fuelOnBoard))

    def fuelFlow(self, fuelOnBoard: float) -> float:
        return self.performance.fuelFlow(ACPERF.fuel_flow_climb, self.grossWeight(fuelOnBoard))


class VerticalSpeedStrategy(DescentStrategy, ClimbStrategy):
    """
    Climb or descent at a selected vertical speed in ft/min, negative values descend.
    """
    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions, verticalSpeed: float):
        Strategy.__init__(self, observer, atmosphericConditions)
        self.selectedVerticalSpeed = verticalSpeed

    def verticalSpeed(self, altitude: float, fuelOnBoard: float) -> float:
        return self.selectedVerticalSpeed

    def fuelFlow(self, fuelOnBoard: float) -> float:
        name = ACPERF.fuel_flow_climb if self.selectedVerticalSpeed > 0 else ACPERF.fuel_flow_idle
        return self.performance.fuelFlow(name, self.grossWeight(fuelOnBoard))


class IdleDescentStrategy(DescentStrategy):
    """
    Descent at idle thrust.
    """
    predictedN1 = IDLE_N1

    def verticalSpeed(self, altitude: float, fuelOnBoard: float) -> float:
        return - self.performance.descentVerticalSpeed(altitude)

    def fuelFlow(self, fuelOnBoard: float) -> float:
        return self.performance.fuelFlow(ACPERF.fuel_flow_idle, self.grossWeight(fuelOnBoard))
