"""
Vertical profiles: ordered lists of vertical checkpoints along the lateral path.
"""
from __future__ import annotations
import logging
from typing import Callable, List

from tabulate import tabulate

from fmspy.constants import CHECKPOINT_REASON
from fmspy.utils import interpolate, interpolate_table
from fmspy.guidance.lnav import Geometry
from fmspy.guidance.vnav.checkpoint import VerticalCheckpoint, TimePrediction
from fmspy.guidance.vnav.constraintreader import ConstraintReader
from fmspy.guidance.vnav.predictions import StepResults

logger = logging.getLogger("GeometryProfile")


class BaseGeometryProfile:
    """
    A profile is built by appending or inserting checkpoints, then finalized for querying.
    """
    def __init__(self):
        self.checkpoints: List[VerticalCheckpoint] = []
        self.isReadyToDisplay = False

        self.maxClimbAltitudeConstraints = []
        self.maxClimbSpeedConstraints = []
        self.descentAltitudeConstraints = []
        self.descentSpeedConstraints = []
        self.distanceToPresentPosition = 0

    @property
    def lastCheckpoint(self) -> VerticalCheckpoint | None:
        return self.checkpoints[-1] if len(self.checkpoints) > 0 else None

    def addCheckpoint(self, checkpoint: VerticalCheckpoint):
        self.checkpoints.append(checkpoint)

    def addPresentPositionCheckpoint(self, altitude: float, remainingFuelOnBoard: float, speed: float = 0):
        self.checkpoints.append(VerticalCheckpoint(reason=CHECKPOINT_REASON.PRESENT_POSITION,
                                                   distanceFromStart=self.distanceToPresentPosition,
                                                   altitude=altitude,
                                                   speed=speed,
                                                   secondsFromPresent=0,
                                                   remainingFuelOnBoard=remainingFuelOnBoard))

    def addCheckpointFromLast(self, build: Callable[[VerticalCheckpoint], VerticalCheckpoint]):
        """
        Appends the checkpoint returned by build() applied to the last checkpoint.
        """
        self.checkpoints.append(build(self.checkpoints[-1]))

    def addCheckpointFromStep(self, step: StepResults, reason: CHECKPOINT_REASON) -> VerticalCheckpoint:
        """
        Appends the checkpoint reached by flying step from the last checkpoint.
        """
        last = self.checkpoints[-1]
        checkpoint = VerticalCheckpoint(reason=reason,
                                        distanceFromStart=last.distanceFromStart + step.distanceTraveled,
                                        altitude=step.finalAltitude,
                                        speed=step.speed,
                                        secondsFromPresent=last.secondsFromPresent + step.timeElapsed,
                                        remainingFuelOnBoard=last.remainingFuelOnBoard - step.fuelBurned)
        self.checkpoints.append(checkpoint)
        return checkpoint

    def addCheckpointAtDistanceFromStart(self, distanceFromStart: float, *checkpoints: VerticalCheckpoint):
        """
        Inserts checkpoints after all existing checkpoints at or before distanceFromStart.
        """
        index = 0
        while index < len(self.checkpoints) and self.checkpoints[index].distanceFromStart <= distanceFromStart:
            index = index + 1
        self.checkpoints[index:index] = list(checkpoints)

    def findVerticalCheckpointIndex(self, *reasons: CHECKPOINT_REASON) -> int:
        for i, c in enumerate(self.checkpoints):
            if c.reason in reasons:
                return i
        return -1

    def findVerticalCheckpoint(self, *reasons: CHECKPOINT_REASON) -> VerticalCheckpoint | None:
        i = self.findVerticalCheckpointIndex(*reasons)
        return self.checkpoints[i] if i >= 0 else None

    def findLastVerticalCheckpoint(self, *reasons: CHECKPOINT_REASON) -> VerticalCheckpoint | None:
        for c in reversed(self.checkpoints):
            if c.reason in reasons:
                return c
        return None

    def findStartOfCruiseIndex(self) -> int:
        """
        Top of climb if any, present position otherwise.
        """
        i = self.findVerticalCheckpointIndex(CHECKPOINT_REASON.TOP_OF_CLIMB)
        if i < 0:
            i = self.findVerticalCheckpointIndex(CHECKPOINT_REASON.PRESENT_POSITION)
        return i

    def findStartOfCruise(self) -> VerticalCheckpoint | None:
        i = self.findStartOfCruiseIndex()
        return self.checkpoints[i] if i >= 0 else None

    def removeCheckpointsAfter(self, index: int):
        del self.checkpoints[index + 1:]

    def removeCheckpoints(self, reason: CHECKPOINT_REASON):
        self.checkpoints = [c for c in self.checkpoints if c.reason != reason]

    def resetAltitudeConstraints(self):
        self.maxClimbAltitudeConstraints = []
        self.descentAltitudeConstraints = []

    #
    # Queries
    #
    def _table(self, attribute: str, checkpoints: List[VerticalCheckpoint] = None) -> list:
        cps = checkpoints if checkpoints is not None else self.checkpoints
        return [(c.distanceFromStart, getattr(c, attribute)) for c in cps]

    def interpolateAltitudeAtDistance(self, distanceFromStart: float) -> float | None:
        return interpolate_table(distanceFromStart, self._table("altitude"))

    def interpolateSpeedAtDistance(self, distanceFromStart: float) -> float | None:
        return interpolate_table(distanceFromStart, self._table("speed"))

    def interpolateTimeAtDistance(self, distanceFromStart: float) -> float | None:
        return interpolate_table(distanceFromStart, self._table("secondsFromPresent"))

    def interpolateFuelAtDistance(self, distanceFromStart: float) -> float | None:
        return interpolate_table(distanceFromStart, self._table("remainingFuelOnBoard"))

    def interpolateDistanceAtAltitude(self, altitude: float) -> float | None:
        """
        First distance where the profile crosses altitude.
        """
        for i in range(1, len(self.checkpoints)):
            c0 = self.checkpoints[i - 1]
            c1 = self.checkpoints[i]
            if min(c0.altitude, c1.altitude) <= altitude <= max(c0.altitude, c1.altitude) and c0.altitude != c1.altitude:
                return interpolate(altitude, c0.altitude, c1.altitude, c0.distanceFromStart, c1.distanceFromStart)
        return None

    def interpolateDistanceAtTime(self, secondsFromPresent: float) -> float | None:
        table = [(c.secondsFromPresent, c.distanceFromStart) for c in self.checkpoints]
        return interpolate_table(secondsFromPresent, table)

    def predictAtTime(self, secondsFromPresent: float) -> TimePrediction | None:
        """
        Position of the aircraft secondsFromPresent seconds from now, None if outside of the profile.
        """
        if len(self.checkpoints) == 0:
            return None
        if secondsFromPresent < self.checkpoints[0].secondsFromPresent or secondsFromPresent > self.checkpoints[-1].secondsFromPresent:
            return None
        distanceFromStart = self.interpolateDistanceAtTime(secondsFromPresent)
        return TimePrediction(distanceFromStart=distanceFromStart,
                              altitude=self.interpolateAltitudeAtDistance(distanceFromStart),
                              speed=self.interpolateSpeedAtDistance(distanceFromStart),
                              secondsFromPresent=secondsFromPresent)

    def finalizeProfile(self):
        """
        Orders checkpoints by distance, the sort is stable so that checkpoints at the same distance keep their order.
        """
        self.checkpoints.sort(key=lambda c: c.distanceFromStart)
        self.isReadyToDisplay = True

    def tabulate(self) -> str:
        table = []
        for c in self.checkpoints:
            table.append([c.reason.value, round(c.distanceFromStart, 1), round(c.altitude), round(c.speed),
                          round(c.secondsFromPresent), round(c.remainingFuelOnBoard)])
        return tabulate(table, headers=["reason", "distance", "altitude", "speed", "time", "fuel"])

    def __repr__(self):
        return f"{type(self).__name__}({len(self.checkpoints)} checkpoints, ready={self.isReadyToDisplay})"


class NavGeometryProfile(BaseGeometryProfile):
    """
    Managed profile along the lateral geometry, constraints come from the flight plan.
    """
    def __init__(self, geometry: Geometry, constraintReader: ConstraintReader, waypointCount: int):
        BaseGeometryProfile.__init__(self)
        self.geometry = geometry
        self.waypointCount = waypointCount

        self.maxClimbAltitudeConstraints = list(constraintReader.climbAltitudeConstraints)
        self.maxClimbSpeedConstraints = list(constraintReader.climbSpeedConstraints)
        self.descentAltitudeConstraints = list(constraintReader.descentAltitudeConstraints)
        self.descentSpeedConstraints = list(constraintReader.descentSpeedConstraints)
        self.distanceToPresentPosition = constraintReader.distanceToPresentPosition
        self.totalFlightPlanDistance = constraintReader.totalDistance


class SelectedGeometryProfile(BaseGeometryProfile):
    """
    Profile for selected guidance modes, without constraints.
    """
    pass
