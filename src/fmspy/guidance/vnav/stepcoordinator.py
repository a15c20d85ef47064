"""
Cruise steps requested by the crew.
"""
from __future__ import annotations
import logging
from typing import List

from fmspy.constants import CHECKPOINT_REASON
from fmspy.guidance.lnav import Geometry

logger = logging.getLogger("StepCoordinator")


class GeographicCruiseStep:
    """
    A cruise altitude change at a distance from start, or at the end of a flight plan leg.
    """
    def __init__(self, distanceFromStart: float, toAltitude: float, waypointIndex: int = None, isIgnored: bool = False):
        self.distanceFromStart = distanceFromStart
        self.toAltitude = toAltitude
        self.waypointIndex = waypointIndex
        self.isIgnored = isIgnored

    def __repr__(self):
        s = f"Step(FL{round(self.toAltitude / 100):03d} at {round(self.distanceFromStart, 1)} NM"
        if self.waypointIndex is not None:
            s = s + f" wpt {self.waypointIndex}"
        return s + (", ignored)" if self.isIgnored else ")")


class StepCoordinator:
    """
    Steps are kept in ascending distance order.
    """
    def __init__(self):
        self.steps: List[GeographicCruiseStep] = []

    def requestStep(self, distanceFromStart: float, toAltitude: float, waypointIndex: int = None) -> GeographicCruiseStep:
        step = GeographicCruiseStep(distanceFromStart, toAltitude, waypointIndex)
        self.steps.append(step)
        self.steps.sort(key=lambda s: s.distanceFromStart)
        logger.debug(f":requestStep: {step}")
        return step

    def requestStepAtWaypoint(self, geometry: Geometry, waypointIndex: int, toAltitude: float) -> GeographicCruiseStep:
        return self.requestStep(geometry.distanceToEndOfLeg(waypointIndex), toAltitude, waypointIndex)

    def removeStep(self, step: GeographicCruiseStep):
        if step in self.steps:
            self.steps.remove(step)

    def clear(self):
        self.steps = []

    def updateGeometry(self, geometry: Geometry):
        """
        Relocates steps attached to a waypoint after a geometry change.
        Steps whose waypoint left the geometry are removed.
        """
        kept = []
        for step in self.steps:
            if step.waypointIndex is not None:
                if step.waypointIndex not in geometry.legs:
                    logger.warning(f":updateGeometry: waypoint {step.waypointIndex} no longer in geometry, removing {step}")
                    continue
                step.distanceFromStart = geometry.distanceToEndOfLeg(step.waypointIndex)
            kept.append(step)
        self.steps = sorted(kept, key=lambda s: s.distanceFromStart)

    def updateGeometryProfile(self, profile):
        """
        Flags steps that fall outside of the cruise segment of the profile.
        """
        startOfCruise = profile.findStartOfCruise()
        topOfDescent = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
        if startOfCruise is None or topOfDescent is None:
            return
        for step in self.steps:
            step.isIgnored = not (startOfCruise.distanceFromStart <= step.distanceFromStart <= topOfDescent.distanceFromStart)
