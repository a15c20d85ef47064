#
import logging
from typing import NamedTuple

from fmspy.constants import CHECKPOINT_REASON
from fmspy.exceptions import ProfileComputationError
from fmspy.utils import convert
from fmspy.aircraft import ACPERF
from fmspy.guidance.vnav.checkpoint import VerticalCheckpoint
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParametersObserver
from fmspy.guidance.vnav.predictions import Predictions, StepResults, AtmosphericConditions
from fmspy.guidance.vnav.profile import BaseGeometryProfile
from fmspy.guidance.vnav.stepcoordinator import StepCoordinator
from fmspy.guidance.vnav.strategies import ClimbStrategy, DescentStrategy

logger = logging.getLogger("CruisePathBuilder")


class CruisePathBuilderResults(NamedTuple):
    remainingFuelOnBoardAtTopOfDescent: float
    secondsFromPresentAtTopOfDescent: float


class CruisePathBuilder:

    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions, stepCoordinator: StepCoordinator):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions
        self.stepCoordinator = stepCoordinator

    def update(self):
        self.atmosphericConditions.update(self.observer.get().isaDeviation)

    def computeCruisePath(self, profile: BaseGeometryProfile, stepClimbStrategy: ClimbStrategy, stepDescentStrategy: DescentStrategy) -> CruisePathBuilderResults:
        """
        Builds the cruise segment from start of cruise to top of descent, with the requested steps.
        Returns the predicted fuel and time at top of descent.
        """
        startOfCruise = profile.findStartOfCruise()
        topOfDescent = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)

        if startOfCruise is None or topOfDescent is None:
            raise ProfileComputationError("Start of cruise or T/D could not be located")

        if startOfCruise.distanceFromStart > topOfDescent.distanceFromStart:
            raise ProfileComputationError("Cruise segment too short")

        p = self.observer.get()
        checkpointsToAdd = [startOfCruise]

        for step in self.stepCoordinator.steps:
            if step.isIgnored:
                continue

            last = checkpointsToAdd[-1]
            isClimbVsDescent = step.toAltitude > last.altitude

            if step.distanceFromStart < startOfCruise.distanceFromStart or step.distanceFromStart > topOfDescent.distanceFromStart:
                logger.warning(f":computeCruisePath: cruise step is not within cruise segment ({round(step.distanceFromStart, 2)} NM, "
                               f"T/C: {round(startOfCruise.distanceFromStart, 2)} NM, T/D: {round(topOfDescent.distanceFromStart, 2)} NM)")
                continue

            if step.toAltitude == last.altitude:
                logger.debug(f":computeCruisePath: step {step} at current altitude, ignored")
                continue

            segmentToStep = self.computeCruiseSegment(last.altitude, step.distanceFromStart - last.distanceFromStart, last.remainingFuelOnBoard)
            self.addNewCheckpointFromResult(checkpointsToAdd, segmentToStep,
                                            CHECKPOINT_REASON.STEP_CLIMB if isClimbVsDescent else CHECKPOINT_REASON.STEP_DESCENT)

            last = checkpointsToAdd[-1]
            strategy = stepClimbStrategy if isClimbVsDescent else stepDescentStrategy
            stepResults = strategy.predictToAltitude(last.altitude, step.toAltitude, p.managedCruiseSpeed, p.managedCruiseSpeedMach, last.remainingFuelOnBoard)
            self.addNewCheckpointFromResult(checkpointsToAdd, stepResults,
                                            CHECKPOINT_REASON.TOP_OF_STEP_CLIMB if isClimbVsDescent else CHECKPOINT_REASON.BOTTOM_OF_STEP_DESCENT)

        last = checkpointsToAdd[-1]
        cruiseSegment = self.computeCruiseSegment(last.altitude, topOfDescent.distanceFromStart - last.distanceFromStart, last.remainingFuelOnBoard)

        profile.addCheckpointAtDistanceFromStart(startOfCruise.distanceFromStart, *checkpointsToAdd[1:])

        return CruisePathBuilderResults(remainingFuelOnBoardAtTopOfDescent=last.remainingFuelOnBoard - cruiseSegment.fuelBurned,
                                        secondsFromPresentAtTopOfDescent=last.secondsFromPresent + cruiseSegment.timeElapsed)

    def computeCruiseSegment(self, altitude: float, distance: float, remainingFuelOnBoard: float) -> StepResults:
        p = self.observer.get()
        grossWeight = convert.tons_to_pounds(p.zeroFuelWeight) + remainingFuelOnBoard
        return Predictions.levelFlightStep(altitude,
                                           max(distance, 0),
                                           p.managedCruiseSpeed,
                                           p.managedCruiseSpeedMach,
                                           self.observer.performance.fuelFlow(ACPERF.fuel_flow_cruise, grossWeight),
                                           self.atmosphericConditions.isaDeviation)

    def getFinalCruiseAltitude(self) -> float:
        cruiseAltitude = self.observer.get().cruiseAltitude
        steps = [s for s in self.stepCoordinator.steps if not s.isIgnored]
        if len(steps) == 0:
            return cruiseAltitude
        return steps[-1].toAltitude

    @staticmethod
    def addNewCheckpointFromResult(existingCheckpoints: list, result: StepResults, reason: CHECKPOINT_REASON):
        last = existingCheckpoints[-1]
        existingCheckpoints.append(VerticalCheckpoint(reason=reason,
                                                      distanceFromStart=last.distanceFromStart + result.distanceTraveled,
                                                      altitude=result.finalAltitude,
                                                      speed=result.speed,
                                                      secondsFromPresent=last.secondsFromPresent + result.timeElapsed,
                                                      remainingFuelOnBoard=last.remainingFuelOnBoard - result.fuelBurned))
