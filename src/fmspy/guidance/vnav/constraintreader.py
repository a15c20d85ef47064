"""
Extracts the altitude and speed constraints of the geometry legs, with their distance from start.
"""
from __future__ import annotations
import logging
from typing import List, NamedTuple

from fmspy.constants import CLIMB_SEGMENT_TYPES, DESCENT_SEGMENT_TYPES
from fmspy.airspace import AltitudeConstraint
from fmspy.guidance.lnav import Geometry

logger = logging.getLogger("ConstraintReader")


class MaxAltitudeConstraint(NamedTuple):
    distanceFromStart: float
    maxAltitude: float


class MaxSpeedConstraint(NamedTuple):
    distanceFromStart: float
    maxSpeed: float


class DescentAltitudeConstraint(NamedTuple):
    distanceFromStart: float
    constraint: AltitudeConstraint


class ConstraintReader:

    def __init__(self):
        self.climbAltitudeConstraints: List[MaxAltitudeConstraint] = []
        self.climbSpeedConstraints: List[MaxSpeedConstraint] = []
        self.descentAltitudeConstraints: List[DescentAltitudeConstraint] = []
        self.descentSpeedConstraints: List[MaxSpeedConstraint] = []
        self.totalDistance = 0
        self.distanceToPresentPosition = 0

    def reset(self):
        self.climbAltitudeConstraints = []
        self.climbSpeedConstraints = []
        self.descentAltitudeConstraints = []
        self.descentSpeedConstraints = []
        self.totalDistance = 0
        self.distanceToPresentPosition = 0

    def extract(self, geometry: Geometry, activeLegIndex: int, distanceToGoOnActiveLeg: float = 0):
        """
        Constraints apply at the end of their leg.
        Only constraints at or after the active leg are kept.
        """
        self.reset()
        distanceFromStart = 0
        for i in sorted(geometry.legs.keys()):
            leg = geometry.legs[i]
            distanceFromStart = distanceFromStart + geometry.legDistance(i)

            if i == activeLegIndex:
                self.distanceToPresentPosition = distanceFromStart - distanceToGoOnActiveLeg - self.transitionDistance(geometry, i)
            if i < activeLegIndex:
                continue

            alt = leg.metadata.altitudeConstraint
            spd = leg.metadata.speedConstraint
            legEnd = distanceFromStart - self.transitionDistance(geometry, i)

            if leg.segmentType in CLIMB_SEGMENT_TYPES:
                if alt is not None and alt.maxAltitude() is not None:
                    self.climbAltitudeConstraints.append(MaxAltitudeConstraint(legEnd, alt.maxAltitude()))
                if spd is not None and spd.maxSpeed() is not None:
                    self.climbSpeedConstraints.append(MaxSpeedConstraint(legEnd, spd.maxSpeed()))
            elif leg.segmentType in DESCENT_SEGMENT_TYPES:
                if alt is not None:
                    self.descentAltitudeConstraints.append(DescentAltitudeConstraint(legEnd, alt))
                if spd is not None and spd.maxSpeed() is not None:
                    self.descentSpeedConstraints.append(MaxSpeedConstraint(legEnd, spd.maxSpeed()))

        self.totalDistance = distanceFromStart
        logger.debug(f":extract: {len(self.climbAltitudeConstraints)} climb and {len(self.descentAltitudeConstraints)} descent altitude constraints, total {round(self.totalDistance, 1)} NM")

    @staticmethod
    def transitionDistance(geometry: Geometry, index: int) -> float:
        tr = geometry.transitions.get(index)
        return tr.distance if tr is not None else 0
