"""
Vertical navigation driver.
Builds the managed (MCDU) profile and the profile displayed on the navigation display
from the lateral geometry and the current computation parameters.
"""
from __future__ import annotations
import math
import logging
from typing import Dict

from fmspy.constants import (CHECKPOINT_REASON, FLIGHT_PHASE, LATERAL_MODE, VERTICAL_MODE, ARMED_LATERAL_MODE,
                             ARMED_VERTICAL_MODE, ALTITUDE_CONSTRAINT_MODES)
from fmspy.exceptions import ProfileComputationError
from fmspy.parameters import DESCENT_VERTICAL_SPEED, DEBUG_PROFILE
from fmspy.utils import convert, interpolate_table
from fmspy.guidance.lnav import Geometry
from fmspy.guidance.vnav.checkpoint import TimePrediction
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParametersObserver
from fmspy.guidance.vnav.constraintreader import ConstraintReader
from fmspy.guidance.vnav.predictions import AtmosphericConditions
from fmspy.guidance.vnav.profile import BaseGeometryProfile, NavGeometryProfile, SelectedGeometryProfile
from fmspy.guidance.vnav.speedprofile import McduSpeedProfile, NdSpeedProfile, ExpediteSpeedProfile
from fmspy.guidance.vnav.strategies import ClimbThrustClimbStrategy, VerticalSpeedStrategy, IdleDescentStrategy
from fmspy.guidance.vnav.stepcoordinator import StepCoordinator, GeographicCruiseStep
from fmspy.guidance.vnav.takeoff import TakeoffPathBuilder
from fmspy.guidance.vnav.climb import ClimbPathBuilder
from fmspy.guidance.vnav.cruise import CruisePathBuilder
from fmspy.guidance.vnav.descent import DescentPathBuilder, DecelPathBuilder, TacticalDescentPathBuilder
from fmspy.guidance.vnav.cruisetodescent import CruiseToDescentCoordinator

logger = logging.getLogger("VnavDriver")


TACTICAL_CLIMB_MODES = [VERTICAL_MODE.OP_CLB]
TACTICAL_DESCENT_MODES = [VERTICAL_MODE.OP_DES]


class VnavDriver:
    """
    Owns the profile builders and the profiles computed from the last accepted geometry.
    waypointCount is read from the flight plan service active plan.
    """
    def __init__(self, observer: VerticalProfileComputationParametersObserver, flightPlanService=None):
        self.observer = observer
        self.flightPlanService = flightPlanService
        self.version = 0

        self.atmosphericConditions = AtmosphericConditions(observer.get().isaDeviation)
        self.currentMcduSpeedProfile = McduSpeedProfile(observer.get(), 0, [], [])

        self.takeoffPathBuilder = TakeoffPathBuilder(observer, self.atmosphericConditions)
        self.climbPathBuilder = ClimbPathBuilder(observer, self.atmosphericConditions)
        self.stepCoordinator = StepCoordinator()
        self.cruisePathBuilder = CruisePathBuilder(observer, self.atmosphericConditions, self.stepCoordinator)
        self.tacticalDescentPathBuilder = TacticalDescentPathBuilder(observer, self.atmosphericConditions)
        self.managedDescentPathBuilder = DescentPathBuilder(observer, self.atmosphericConditions)
        self.decelPathBuilder = DecelPathBuilder(observer, self.atmosphericConditions)
        self.cruiseToDescentCoordinator = CruiseToDescentCoordinator(self.cruisePathBuilder, self.managedDescentPathBuilder, self.decelPathBuilder)

        self.constraintReader = ConstraintReader()

        self.geometry = None
        self.activeLegIndex = 0
        self.currentNavGeometryProfile = NavGeometryProfile(Geometry(), self.constraintReader, 0)
        self.currentNdGeometryProfile = None
        self.timeMarkers: Dict[float, TimePrediction | None] = {}
        self.lastCruiseAltitude = 0

    @property
    def waypointCount(self) -> int:
        if self.flightPlanService is None:
            return self.geometry.legCount if self.geometry is not None else 0
        return self.flightPlanService.active.legCount

    def acceptMultipleLegGeometry(self, geometry: Geometry, activeLegIndex: int = 0):
        """
        Recomputes all profiles for a new or updated geometry.
        If the computation fails, the driver is left as it was before the call and the error is raised.
        """
        snapshot = self.snapshot()
        try:
            self.geometry = geometry
            self.activeLegIndex = activeLegIndex
            self.stepCoordinator.updateGeometry(geometry)
            self.computeProfiles()
        except ProfileComputationError:
            self.restore(snapshot)
            raise

    def update(self, deltaTime: float = 0):
        """
        Periodic update: profiles are recomputed when the cruise altitude changed.
        """
        newCruiseAltitude = self.observer.get().cruiseAltitude
        if newCruiseAltitude != self.lastCruiseAltitude and self.geometry is not None:
            logger.debug(f":update: new cruise altitude {newCruiseAltitude}, recomputing vertical profile")
            snapshot = self.snapshot()
            try:
                self.computeProfiles()
            except ProfileComputationError:
                self.restore(snapshot)
                raise

        self.updateTimeMarkers()
        self.atmosphericConditions.update(self.observer.get().isaDeviation)

    def snapshot(self) -> tuple:
        """
        Derived state of the driver, restored when a profile computation fails.
        """
        steps = [(s, s.distanceFromStart, s.isIgnored) for s in self.stepCoordinator.steps]
        return (self.geometry, self.activeLegIndex, self.lastCruiseAltitude, steps,
                self.currentNavGeometryProfile, self.currentNdGeometryProfile, self.currentMcduSpeedProfile,
                dict(self.timeMarkers), self.version)

    def restore(self, snapshot: tuple):
        (self.geometry, self.activeLegIndex, self.lastCruiseAltitude, steps,
         self.currentNavGeometryProfile, self.currentNdGeometryProfile, self.currentMcduSpeedProfile,
         self.timeMarkers, self.version) = snapshot
        for step, distanceFromStart, isIgnored in steps:
            step.distanceFromStart = distanceFromStart
            step.isIgnored = isIgnored
        self.stepCoordinator.steps = [s[0] for s in steps]

    def computeProfiles(self):
        p = self.observer.get()
        self.lastCruiseAltitude = p.cruiseAltitude
        self.constraintReader.extract(self.geometry, self.activeLegIndex, p.distanceToGoOnActiveLeg)
        self.cruisePathBuilder.update()

        self.computeVerticalProfileForMcdu(self.geometry)
        self.computeVerticalProfileForNd(self.geometry)

        self.stepCoordinator.updateGeometryProfile(self.currentNavGeometryProfile)
        self.updateTimeMarkers()
        self.version = self.version + 1

    #
    # Profiles
    #
    def finishProfileInManagedModes(self, profile: BaseGeometryProfile, fromFlightPhase: FLIGHT_PHASE):
        """
        Completes profile to destination from its last checkpoint.
        """
        p = self.observer.get()
        managedClimbStrategy = ClimbThrustClimbStrategy(self.observer, self.atmosphericConditions)
        stepDescentStrategy = VerticalSpeedStrategy(self.observer, self.atmosphericConditions, DESCENT_VERTICAL_SPEED)

        if fromFlightPhase < FLIGHT_PHASE.CLIMB:
            self.takeoffPathBuilder.buildTakeoffPath(profile)

        self.currentMcduSpeedProfile = McduSpeedProfile(p,
                                                        self.currentNavGeometryProfile.distanceToPresentPosition,
                                                        self.currentNavGeometryProfile.maxClimbSpeedConstraints,
                                                        self.currentNavGeometryProfile.descentSpeedConstraints)

        if fromFlightPhase < FLIGHT_PHASE.CRUISE:
            self.climbPathBuilder.computeClimbPath(profile, managedClimbStrategy, self.currentMcduSpeedProfile, p.cruiseAltitude)

        if isinstance(profile, NavGeometryProfile) and self.cruiseToDescentCoordinator.canCompute(profile):
            self.cruiseToDescentCoordinator.buildCruiseAndDescentPath(profile, self.currentMcduSpeedProfile, managedClimbStrategy, stepDescentStrategy)

    def computeVerticalProfileForMcdu(self, geometry: Geometry):
        p = self.observer.get()
        self.currentNavGeometryProfile = NavGeometryProfile(geometry, self.constraintReader, self.waypointCount)

        if geometry.legCount <= 0 or not self.observer.canComputeProfile() \
           or not self.decelPathBuilder.canCompute(geometry, self.currentNavGeometryProfile.waypointCount):
            logger.debug(":computeVerticalProfileForMcdu: cannot compute profile")
            return

        if p.flightPhase >= FLIGHT_PHASE.CLIMB:
            self.currentNavGeometryProfile.addPresentPositionCheckpoint(p.presentPosition, convert.tons_to_pounds(p.fuelOnBoard), p.presentSpeed)

        self.finishProfileInManagedModes(self.currentNavGeometryProfile, max(FLIGHT_PHASE.TAKEOFF, p.flightPhase))
        self.currentNavGeometryProfile.finalizeProfile()

        if DEBUG_PROFILE:
            logger.debug(f":computeVerticalProfileForMcdu: profile\n{self.currentNavGeometryProfile.tabulate()}")
            logger.debug(f":computeVerticalProfileForMcdu: speed constraints\n{self.currentMcduSpeedProfile.tabulate()}")

    def computeVerticalProfileForNd(self, geometry: Geometry):
        p = self.observer.get()
        if self.isInManagedNav():
            self.currentNdGeometryProfile = NavGeometryProfile(geometry, self.constraintReader, self.waypointCount)
        else:
            self.currentNdGeometryProfile = SelectedGeometryProfile()

        if not self.observer.canComputeProfile():
            return

        profile = self.currentNdGeometryProfile
        if p.flightPhase >= FLIGHT_PHASE.CLIMB:
            profile.addPresentPositionCheckpoint(p.presentPosition, convert.tons_to_pounds(p.fuelOnBoard), p.presentSpeed)
        else:
            self.takeoffPathBuilder.buildTakeoffPath(profile)

        if not self.shouldObeyAltitudeConstraints():
            profile.resetAltitudeConstraints()

        if self.shouldObeySpeedConstraints():
            speedProfile = self.currentMcduSpeedProfile
        else:
            speedProfile = NdSpeedProfile(p, profile.distanceToPresentPosition, profile.maxClimbSpeedConstraints, profile.descentSpeedConstraints)

        if p.fcuVerticalMode in TACTICAL_CLIMB_MODES or (p.fcuVerticalMode == VERTICAL_MODE.VS and p.fcuVerticalSpeed > 0):
            if p.fcuVerticalMode == VERTICAL_MODE.VS:
                climbStrategy = VerticalSpeedStrategy(self.observer, self.atmosphericConditions, p.fcuVerticalSpeed)
            else:
                climbStrategy = ClimbThrustClimbStrategy(self.observer, self.atmosphericConditions)
            self.climbPathBuilder.computeClimbPath(profile, climbStrategy, speedProfile, p.fcuAltitude, CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_CLIMB)
        elif p.fcuVerticalMode in TACTICAL_DESCENT_MODES or (p.fcuVerticalMode == VERTICAL_MODE.VS and p.fcuVerticalSpeed < 0):
            if p.fcuVerticalMode == VERTICAL_MODE.VS:
                descentStrategy = VerticalSpeedStrategy(self.observer, self.atmosphericConditions, p.fcuVerticalSpeed)
            else:
                descentStrategy = IdleDescentStrategy(self.observer, self.atmosphericConditions)
            self.tacticalDescentPathBuilder.buildTacticalDescentPath(profile, descentStrategy, speedProfile, p.fcuAltitude)

        if self.isInManagedNav():
            # managed profile continues from the end of the tactical segment
            if len(profile.checkpoints) > 1:
                profile.removeCheckpoints(CHECKPOINT_REASON.PRESENT_POSITION)
                profile.addCheckpointFromLast(lambda c: c._replace(reason=CHECKPOINT_REASON.PRESENT_POSITION))
            self.finishProfileInManagedModes(profile, max(FLIGHT_PHASE.CLIMB, p.flightPhase))

        profile.finalizeProfile()

        if DEBUG_PROFILE:
            logger.debug(f":computeVerticalProfileForNd: profile\n{profile.tabulate()}")

    def computeVerticalProfileForExpediteClimb(self) -> SelectedGeometryProfile | None:
        p = self.observer.get()
        if p.greenDotSpeed is None or p.greenDotSpeed <= 0:
            logger.debug(":computeVerticalProfileForExpediteClimb: no green dot speed")
            return None

        profile = SelectedGeometryProfile()
        climbStrategy = ClimbThrustClimbStrategy(self.observer, self.atmosphericConditions)
        profile.addPresentPositionCheckpoint(p.presentPosition, convert.tons_to_pounds(p.fuelOnBoard), p.greenDotSpeed)
        self.climbPathBuilder.computeClimbPath(profile, climbStrategy, ExpediteSpeedProfile(p.greenDotSpeed), p.fcuAltitude,
                                               CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_CLIMB)
        profile.finalizeProfile()
        return profile

    #
    # Guidance policy
    #
    def isInManagedNav(self) -> bool:
        p = self.observer.get()
        return p.fcuLateralMode == LATERAL_MODE.NAV or ARMED_LATERAL_MODE.NAV in p.fcuArmedLateralMode

    def shouldObeySpeedConstraints(self) -> bool:
        return self.isInManagedNav() and self.observer.get().fcuSpeed <= 0

    def shouldObeyAltitudeConstraints(self) -> bool:
        p = self.observer.get()
        return ARMED_VERTICAL_MODE.CLB in p.fcuArmedVerticalMode \
            or ARMED_LATERAL_MODE.NAV in p.fcuArmedLateralMode \
            or p.fcuVerticalMode in ALTITUDE_CONSTRAINT_MODES

    #
    # Outputs
    #
    def getCurrentSpeedConstraint(self) -> float:
        if self.shouldObeySpeedConstraints():
            return self.currentMcduSpeedProfile.getCurrentSpeedTarget()
        return math.inf

    def getVerticalDeviation(self) -> float | None:
        """
        Altitude of the aircraft above the managed profile, in ft.
        """
        profile = self.currentNavGeometryProfile
        ppos = profile.findVerticalCheckpoint(CHECKPOINT_REASON.PRESENT_POSITION)
        if ppos is None:
            return None
        table = [(c.distanceFromStart, c.altitude) for c in profile.checkpoints if c.reason != CHECKPOINT_REASON.PRESENT_POSITION]
        altitudeWeShouldBeAt = interpolate_table(ppos.distanceFromStart, table)
        if altitudeWeShouldBeAt is None:
            return None
        return ppos.altitude - altitudeWeShouldBeAt

    def getDistanceToTopOfDescent(self) -> float | None:
        profile = self.currentNavGeometryProfile
        tod = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
        if tod is None:
            return None
        return tod.distanceFromStart - profile.distanceToPresentPosition

    def requestCruiseStep(self, toAltitude: float, waypointIndex: int = None, distanceFromStart: float = None) -> GeographicCruiseStep | None:
        if waypointIndex is not None:
            if self.geometry is None or waypointIndex not in self.geometry.legs:
                logger.warning(f":requestCruiseStep: waypoint {waypointIndex} not in geometry, step ignored")
                return None
            return self.stepCoordinator.requestStepAtWaypoint(self.geometry, waypointIndex, toAltitude)
        if distanceFromStart is None:
            logger.warning(":requestCruiseStep: no step location, step ignored")
            return None
        return self.stepCoordinator.requestStep(distanceFromStart, toAltitude)

    #
    # Time markers
    #
    def addTimeMarker(self, secondsFromPresent: float):
        self.timeMarkers[secondsFromPresent] = None
        self.updateTimeMarkers()

    def removeTimeMarker(self, secondsFromPresent: float):
        if secondsFromPresent in self.timeMarkers:
            del self.timeMarkers[secondsFromPresent]

    def updateTimeMarkers(self):
        if not self.currentNavGeometryProfile.isReadyToDisplay:
            return
        for t in self.timeMarkers.keys():
            self.timeMarkers[t] = self.currentNavGeometryProfile.predictAtTime(t)
