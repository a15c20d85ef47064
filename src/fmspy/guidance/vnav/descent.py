"""
Descent side of the vertical profile.
The managed descent and the deceleration path are computed backwards from the destination,
the tactical descent is computed forwards from the aircraft.
"""
from __future__ import annotations
import math
import logging

from fmspy.constants import CHECKPOINT_REASON, MANAGED_SPEED_TYPE, DISTANCE_EPSILON
from fmspy.exceptions import ProfileComputationError
from fmspy.parameters import (DESCENT_ALTITUDE_STEP, GLIDE_PATH_ANGLE, STABILIZATION_HEIGHT, LANDING_HEIGHT,
                              DECEL_RATE, MIN_DECEL_DISTANCE, DEBUG_PROFILE)
from fmspy.utils import convert, casToTas
from fmspy.aircraft import ACPERF
from fmspy.guidance.lnav import Geometry
from fmspy.guidance.vnav.checkpoint import VerticalCheckpoint
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParametersObserver
from fmspy.guidance.vnav.predictions import Predictions, StepResults, AtmosphericConditions
from fmspy.guidance.vnav.profile import BaseGeometryProfile, NavGeometryProfile
from fmspy.guidance.vnav.speedprofile import SpeedProfile
from fmspy.guidance.vnav.strategies import DescentStrategy, IdleDescentStrategy

logger = logging.getLogger("DescentPathBuilder")


def backwards(checkpoint: VerticalCheckpoint, step: StepResults, reason: CHECKPOINT_REASON) -> VerticalCheckpoint:
    """
    Checkpoint at the start of step, step ending at checkpoint.
    """
    return VerticalCheckpoint(reason=reason,
                              distanceFromStart=checkpoint.distanceFromStart - step.distanceTraveled,
                              altitude=step.initialAltitude,
                              speed=step.speed,
                              secondsFromPresent=checkpoint.secondsFromPresent - step.timeElapsed,
                              remainingFuelOnBoard=checkpoint.remainingFuelOnBoard + step.fuelBurned)


class DecelPathBuilder:
    """
    Landing, final approach on the glide path and configuration changes back to the decel point.
    """
    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions

    def canCompute(self, geometry: Geometry, waypointCount: int) -> bool:
        return geometry.legCount > 0 and waypointCount > 0 and geometry.totalDistance() >= MIN_DECEL_DISTANCE

    def computeDecelPath(self, profile: NavGeometryProfile, speedProfile: SpeedProfile, fuelAtDestination: float, timeAtDestination: float):
        p = self.observer.get()
        perf = self.observer.performance

        elevation = p.destinationAirfieldElevation
        vapp = p.approachSpeed
        flapsSpeed = max(perf.require(ACPERF.flaps_speed), vapp)
        slatsSpeed = max(perf.require(ACPERF.slats_speed), flapsSpeed)
        greenDot = max(p.greenDotSpeed, slatsSpeed)

        landing = VerticalCheckpoint(reason=CHECKPOINT_REASON.LANDING,
                                     distanceFromStart=profile.totalFlightPlanDistance,
                                     altitude=elevation + LANDING_HEIGHT,
                                     speed=vapp,
                                     secondsFromPresent=timeAtDestination,
                                     remainingFuelOnBoard=fuelAtDestination)

        grossWeight = convert.tons_to_pounds(p.zeroFuelWeight) + fuelAtDestination
        fuelFlow = perf.fuelFlow(ACPERF.fuel_flow_approach, grossWeight)

        stabilized = self.glideStepBackwards(landing, elevation + STABILIZATION_HEIGHT, vapp, vapp, fuelFlow, CHECKPOINT_REASON.FLAPS_FULL)
        flaps3 = self.glideStepBackwards(stabilized, None, flapsSpeed, vapp, fuelFlow, CHECKPOINT_REASON.FLAPS3)
        flaps2 = self.glideStepBackwards(flaps3, None, slatsSpeed, flapsSpeed, fuelFlow, CHECKPOINT_REASON.FLAPS2)
        flaps1 = self.glideStepBackwards(flaps2, None, greenDot, slatsSpeed, fuelFlow, CHECKPOINT_REASON.FLAPS1)
        decelSpeed = max(speedProfile.getTarget(flaps1.distanceFromStart, flaps1.altitude, MANAGED_SPEED_TYPE.DESCENT), greenDot)
        decel = self.glideStepBackwards(flaps1, None, decelSpeed, greenDot, fuelFlow, CHECKPOINT_REASON.DECEL)

        profile.addCheckpointAtDistanceFromStart(decel.distanceFromStart, decel, flaps1, flaps2, flaps3, stabilized, landing)

    def glideStepBackwards(self, checkpoint: VerticalCheckpoint, initialAltitude: float | None, initialSpeed: float, finalSpeed: float,
                           fuelFlow: float, reason: CHECKPOINT_REASON) -> VerticalCheckpoint:
        """
        Segment on the glide path ending at checkpoint. Either climbs back to initialAltitude at constant speed,
        or decelerates from initialSpeed to finalSpeed.
        """
        gradient = math.tan(math.radians(GLIDE_PATH_ANGLE))
        if initialAltitude is not None:
            height = max(initialAltitude - checkpoint.altitude, 0)
            distance = convert.feet_to_nm(height / gradient)
            tas = casToTas(finalSpeed, checkpoint.altitude + height / 2, self.atmosphericConditions.isaDeviation)
            time = distance / tas * 3600 if tas > 0 else 0
        else:
            time = abs(initialSpeed - finalSpeed) / DECEL_RATE
            tas = casToTas((initialSpeed + finalSpeed) / 2, checkpoint.altitude, self.atmosphericConditions.isaDeviation)
            distance = tas * time / 3600
            height = convert.nm_to_feet(distance) * gradient
        step = StepResults(initialAltitude=checkpoint.altitude + height,
                           finalAltitude=checkpoint.altitude,
                           distanceTraveled=distance,
                           fuelBurned=fuelFlow * time / 3600,
                           timeElapsed=time,
                           speed=initialSpeed)
        return backwards(checkpoint, step, reason)


class DescentPathBuilder:
    """
    Managed idle descent, built backwards from the decel point up to the cruise altitude.
    Maximum altitude constraints level the descent off, the speed limit crossing is marked.
    """
    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions

    def computeManagedDescentPath(self, profile: BaseGeometryProfile, speedProfile: SpeedProfile, cruiseAltitude: float) -> VerticalCheckpoint:
        decel = profile.findVerticalCheckpoint(CHECKPOINT_REASON.DECEL)
        if decel is None:
            raise ProfileComputationError("Cannot compute managed descent without a decel point")

        p = self.observer.get()
        strategy = IdleDescentStrategy(self.observer, self.atmosphericConditions)

        constraints = []
        for c in profile.descentAltitudeConstraints:
            maxAltitude = c.constraint.maxAltitude()
            if maxAltitude is None or c.distanceFromStart >= decel.distanceFromStart:
                continue
            constraints.append((c.distanceFromStart, maxAltitude))
        constraints.sort(key=lambda c: c[0], reverse=True)

        current = decel
        points = []
        while current.altitude < cruiseAltitude:
            behind = [c for c in constraints if c[0] < current.distanceFromStart - DISTANCE_EPSILON and c[1] < cruiseAltitude]
            constraint = behind[0] if len(behind) > 0 else None

            ceiling = cruiseAltitude
            if constraint is not None:
                ceiling = max(constraint[1], current.altitude)

            if current.altitude >= ceiling:
                # level segment back to the constraint, where the aircraft levels off
                speed = speedProfile.getTarget(current.distanceFromStart, current.altitude, MANAGED_SPEED_TYPE.DESCENT)
                step = Predictions.levelFlightStep(current.altitude,
                                                   current.distanceFromStart - constraint[0],
                                                   speed,
                                                   p.managedDescentSpeedMach,
                                                   strategy.performance.fuelFlow(ACPERF.fuel_flow_cruise, strategy.grossWeight(current.remainingFuelOnBoard)),
                                                   self.atmosphericConditions.isaDeviation)
                current = backwards(current, step, CHECKPOINT_REASON.LEVEL_OFF_DESCENT_CONSTRAINT)
                points.append(current)
                constraints.remove(constraint)
                continue

            target = min(current.altitude + DESCENT_ALTITUDE_STEP, ceiling)
            limitAltitude = p.descentSpeedLimitAltitude
            crossesSpeedLimit = speedProfile.shouldTakeDescentSpeedLimitIntoAccount() and current.altitude < limitAltitude < target
            if crossesSpeedLimit:
                target = limitAltitude

            speed = speedProfile.getTarget(current.distanceFromStart, (current.altitude + target) / 2, MANAGED_SPEED_TYPE.DESCENT)
            step = strategy.predictToAltitude(target, current.altitude, speed, p.managedDescentSpeedMach, current.remainingFuelOnBoard)
            if step.timeElapsed <= 0:
                raise ProfileComputationError(f"No descent performance at {current.altitude}ft")

            if constraint is not None and current.distanceFromStart - step.distanceTraveled < constraint[0]:
                # constraint passed below its altitude
                partial = strategy.predictToDistanceBackwards(current.altitude,
                                                              current.distanceFromStart - constraint[0],
                                                              speed,
                                                              p.managedDescentSpeedMach,
                                                              current.remainingFuelOnBoard)
                partial = partial._replace(initialAltitude=min(partial.initialAltitude, target))
                current = backwards(current, partial, CHECKPOINT_REASON.AT_ALTITUDE_CONSTRAINT)
                points.append(current)
                constraints.remove(constraint)
                continue

            reason = CHECKPOINT_REASON.ATMOSPHERIC_CONDITIONS
            if crossesSpeedLimit:
                reason = CHECKPOINT_REASON.CROSSING_DESCENT_SPEED_LIMIT
            elif constraint is not None and target == constraint[1]:
                reason = CHECKPOINT_REASON.CONTINUE_DESCENT
            current = backwards(current, step, reason)
            points.append(current)

        topOfDescent = current._replace(reason=CHECKPOINT_REASON.TOP_OF_DESCENT)
        if len(points) > 0:
            points[-1] = topOfDescent
        else:
            points.append(topOfDescent)

        points.reverse()
        profile.addCheckpointAtDistanceFromStart(topOfDescent.distanceFromStart, *points)

        if DEBUG_PROFILE:
            logger.debug(f":computeManagedDescentPath: T/D at {round(topOfDescent.distanceFromStart, 1)} NM")
        return topOfDescent


class TacticalDescentPathBuilder:
    """
    Descent from the aircraft to the FCU altitude in selected vertical modes.
    Minimum altitude constraints ahead level the descent off until they are passed.
    """
    def __init__(self, observer: VerticalProfileComputationParametersObserver, atmosphericConditions: AtmosphericConditions = None):
        self.observer = observer
        self.atmosphericConditions = atmosphericConditions if atmosphericConditions is not None else AtmosphericConditions()

    def buildTacticalDescentPath(self, profile: BaseGeometryProfile, descentStrategy: DescentStrategy, speedProfile: SpeedProfile, targetAltitude: float):
        p = self.observer.get()
        constraints = []
        for c in profile.descentAltitudeConstraints:
            minAltitude = c.constraint.minAltitude()
            if minAltitude is not None and minAltitude > targetAltitude:
                constraints.append((c.distanceFromStart, minAltitude))
        constraints.sort(key=lambda c: c[0])

        while profile.lastCheckpoint.altitude > targetAltitude:
            last = profile.lastCheckpoint
            ahead = [c for c in constraints if c[0] > last.distanceFromStart + DISTANCE_EPSILON]
            constraint = ahead[0] if len(ahead) > 0 else None

            floor = targetAltitude
            if constraint is not None:
                floor = min(constraint[1], last.altitude)

            speed = speedProfile.getTarget(last.distanceFromStart, last.altitude, MANAGED_SPEED_TYPE.DESCENT)

            if last.altitude <= floor:
                step = Predictions.levelFlightStep(last.altitude,
                                                   constraint[0] - last.distanceFromStart,
                                                   speed,
                                                   p.managedDescentSpeedMach,
                                                   descentStrategy.performance.fuelFlow(ACPERF.fuel_flow_cruise, descentStrategy.grossWeight(last.remainingFuelOnBoard)),
                                                   self.atmosphericConditions.isaDeviation)
                profile.addCheckpointFromStep(step, CHECKPOINT_REASON.CONTINUE_DESCENT)
                continue

            altitude = max(last.altitude - DESCENT_ALTITUDE_STEP, floor)
            step = descentStrategy.predictToAltitude(last.altitude, altitude, speed, p.managedDescentSpeedMach, last.remainingFuelOnBoard)
            if step.timeElapsed <= 0:
                logger.warning(f":buildTacticalDescentPath: no descent performance at {last.altitude}ft")
                break
            reason = CHECKPOINT_REASON.ATMOSPHERIC_CONDITIONS
            if constraint is not None and altitude == constraint[1]:
                reason = CHECKPOINT_REASON.LEVEL_OFF_DESCENT_CONSTRAINT
            profile.addCheckpointFromStep(step, reason)

        profile.addCheckpointFromLast(lambda c: c._replace(reason=CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_DESCENT))
