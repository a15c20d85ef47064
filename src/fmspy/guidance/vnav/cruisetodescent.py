"""
Cruise and descent convergence.
The descent starts where the cruise ends, and the cruise fuel and time at top of descent depend on
where the descent starts. Both are reconciled by fixed point iteration on the fuel and time at destination.
"""
from __future__ import annotations
import math
import logging

from fmspy.exceptions import ProfileComputationError
from fmspy.parameters import (DEFAULT_FUEL_AT_DESTINATION, DEFAULT_TIME_AT_DESTINATION, CONVERGENCE_MAX_ITERATIONS,
                              CONVERGENCE_FUEL_TOLERANCE, CONVERGENCE_TIME_TOLERANCE)
from fmspy.guidance.vnav.cruise import CruisePathBuilder
from fmspy.guidance.vnav.descent import DescentPathBuilder, DecelPathBuilder
from fmspy.guidance.vnav.profile import NavGeometryProfile
from fmspy.guidance.vnav.speedprofile import SpeedProfile
from fmspy.guidance.vnav.strategies import ClimbStrategy, DescentStrategy

logger = logging.getLogger("CruiseToDescentCoordinator")


class CruiseToDescentCoordinator:

    def __init__(self, cruisePathBuilder: CruisePathBuilder, descentPathBuilder: DescentPathBuilder, decelPathBuilder: DecelPathBuilder):
        self.cruisePathBuilder = cruisePathBuilder
        self.descentPathBuilder = descentPathBuilder
        self.decelPathBuilder = decelPathBuilder
        self.lastEstimatedFuelAtDestination = DEFAULT_FUEL_AT_DESTINATION
        self.lastEstimatedTimeAtDestination = DEFAULT_TIME_AT_DESTINATION
        self.residuals = []  # (fuel error, time error) of each iteration of the last call

    def resetEstimations(self):
        self.lastEstimatedFuelAtDestination = DEFAULT_FUEL_AT_DESTINATION
        self.lastEstimatedTimeAtDestination = DEFAULT_TIME_AT_DESTINATION

    def buildCruiseAndDescentPath(self, profile: NavGeometryProfile, speedProfile: SpeedProfile,
                                  stepClimbStrategy: ClimbStrategy, stepDescentStrategy: DescentStrategy) -> bool:
        """
        Appends cruise, descent and approach checkpoints after the start of cruise.
        Returns False if there is no start of cruise, or if top of descent comes before it.
        """
        startOfCruiseIndex = profile.findStartOfCruiseIndex()
        if startOfCruiseIndex < 0:
            logger.debug(":buildCruiseAndDescentPath: no start of cruise")
            return False
        startOfCruise = profile.checkpoints[startOfCruiseIndex]

        self.residuals = []
        iterationCount = 0
        todFuelError = math.inf
        todTimeError = math.inf

        if math.isnan(self.lastEstimatedFuelAtDestination) or math.isnan(self.lastEstimatedTimeAtDestination):
            self.resetEstimations()

        while iterationCount < CONVERGENCE_MAX_ITERATIONS and (abs(todFuelError) > CONVERGENCE_FUEL_TOLERANCE or abs(todTimeError) > CONVERGENCE_TIME_TOLERANCE):
            iterationCount = iterationCount + 1

            profile.removeCheckpointsAfter(startOfCruiseIndex)
            self.decelPathBuilder.computeDecelPath(profile, speedProfile, self.lastEstimatedFuelAtDestination, self.lastEstimatedTimeAtDestination)

            todCheckpoint = self.descentPathBuilder.computeManagedDescentPath(profile, speedProfile, self.cruisePathBuilder.getFinalCruiseAltitude())
            if todCheckpoint is None:
                raise ProfileComputationError("Could not coordinate cruise and descent path")

            if todCheckpoint.distanceFromStart < startOfCruise.distanceFromStart:
                logger.debug(f":buildCruiseAndDescentPath: T/D at {round(todCheckpoint.distanceFromStart, 1)} NM before start of cruise")
                return False

            cruisePath = self.cruisePathBuilder.computeCruisePath(profile, stepClimbStrategy, stepDescentStrategy)
            if cruisePath is None:
                raise ProfileComputationError("Could not coordinate cruise and descent path")

            todFuelError = cruisePath.remainingFuelOnBoardAtTopOfDescent - todCheckpoint.remainingFuelOnBoard
            todTimeError = cruisePath.secondsFromPresentAtTopOfDescent - todCheckpoint.secondsFromPresent
            self.residuals.append((todFuelError, todTimeError))

            self.lastEstimatedFuelAtDestination = self.lastEstimatedFuelAtDestination + todFuelError
            self.lastEstimatedTimeAtDestination = self.lastEstimatedTimeAtDestination + todTimeError

        logger.debug(f":buildCruiseAndDescentPath: {iterationCount} iterations, fuel at destination {round(self.lastEstimatedFuelAtDestination)} lbs, "
                     f"residuals {[(round(f, 1), round(t, 1)) for f, t in self.residuals]}")
        return True

    def canCompute(self, profile: NavGeometryProfile) -> bool:
        return self.decelPathBuilder.canCompute(profile.geometry, profile.waypointCount)
