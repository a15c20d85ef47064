#
import logging

from fmspy.constants import CHECKPOINT_REASON, MANAGED_SPEED_TYPE, DISTANCE_EPSILON
from fmspy.parameters import CLIMB_ALTITUDE_STEP, DEBUG_PROFILE
from fmspy.utils import convert
from fmspy.aircraft import ACPERF
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParametersObserver
from fmspy.guidance.vnav.predictions import Predictions, AtmosphericConditions
from fmspy.guidance.vnav.profile import BaseGeometryProfile
from fmspy.guidance.vnav.speedprofile import SpeedProfile
from fmspy.guidance.vnav.strategies import ClimbStrategy

logger = logging.getLogger("ClimbPathBuilder")


class ClimbPathBuilder:

    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions

    def computeClimbPath(self, profile: BaseGeometryProfile, climbStrategy: ClimbStrategy, speedProfile: SpeedProfile,
                         targetAltitude: float, finalReason: CHECKPOINT_REASON = CHECKPOINT_REASON.TOP_OF_CLIMB):
        """
        Climbs from the last checkpoint of the profile to targetAltitude.
        The speed limit crossing is marked. Max altitude constraints ahead level the climb off until they are passed.
        """
        p = self.observer.get()
        last = profile.lastCheckpoint

        if speedProfile.shouldTakeClimbSpeedLimitIntoAccount() and last.altitude < p.climbSpeedLimitAltitude < targetAltitude:
            self.climbToAltitude(profile, climbStrategy, speedProfile, p.climbSpeedLimitAltitude)
            profile.addCheckpointFromLast(lambda c: c._replace(reason=CHECKPOINT_REASON.CROSSING_CLIMB_SPEED_LIMIT))

        self.climbToAltitude(profile, climbStrategy, speedProfile, targetAltitude)
        profile.addCheckpointFromLast(lambda c: c._replace(reason=finalReason))

        if DEBUG_PROFILE:
            logger.debug(f":computeClimbPath: climb to {targetAltitude}\n{profile.tabulate()}")

    def climbToAltitude(self, profile: BaseGeometryProfile, climbStrategy: ClimbStrategy, speedProfile: SpeedProfile, targetAltitude: float):
        constraints = sorted(profile.maxClimbAltitudeConstraints, key=lambda c: c.distanceFromStart)

        while profile.lastCheckpoint.altitude < targetAltitude:
            last = profile.lastCheckpoint
            ahead = [c for c in constraints if c.distanceFromStart > last.distanceFromStart + DISTANCE_EPSILON and c.maxAltitude < targetAltitude]
            constraint = ahead[0] if len(ahead) > 0 else None

            ceiling = targetAltitude
            if constraint is not None:
                ceiling = max(constraint.maxAltitude, last.altitude)

            if last.altitude >= ceiling:
                # level off until the constraint is passed
                self.levelOffTo(profile, speedProfile, constraint.distanceFromStart)
                continue

            altitude = min(last.altitude + CLIMB_ALTITUDE_STEP, ceiling)
            speed = speedProfile.getTarget(last.distanceFromStart, last.altitude, MANAGED_SPEED_TYPE.CLIMB)
            step = climbStrategy.predictToAltitude(last.altitude, altitude, speed, self.observer.get().managedClimbSpeedMach, last.remainingFuelOnBoard)
            if step.distanceTraveled <= 0 and step.finalAltitude <= last.altitude:
                logger.warning(f":climbToAltitude: no climb performance at {last.altitude}ft")
                break

            reason = CHECKPOINT_REASON.ATMOSPHERIC_CONDITIONS
            if constraint is not None and altitude == constraint.maxAltitude:
                reason = CHECKPOINT_REASON.LEVEL_OFF_CLIMB_CONSTRAINT
            profile.addCheckpointFromStep(step, reason)

    def levelOffTo(self, profile: BaseGeometryProfile, speedProfile: SpeedProfile, distanceFromStart: float):
        """
        Level flight from the last checkpoint to distanceFromStart, where the climb resumes.
        """
        last = profile.lastCheckpoint
        p = self.observer.get()
        speed = speedProfile.getTarget(last.distanceFromStart, last.altitude, MANAGED_SPEED_TYPE.CLIMB)
        grossWeight = convert.tons_to_pounds(p.zeroFuelWeight) + last.remainingFuelOnBoard
        step = Predictions.levelFlightStep(last.altitude,
                                           distanceFromStart - last.distanceFromStart,
                                           speed,
                                           p.managedClimbSpeedMach,
                                           self.observer.performance.fuelFlow(ACPERF.fuel_flow_cruise, grossWeight),
                                           self.atmosphericConditions.isaDeviation)
        profile.addCheckpointFromStep(step, CHECKPOINT_REASON.CONTINUE_CLIMB)
