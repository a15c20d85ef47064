"""
Speed targets along the vertical profile.
"""
from __future__ import annotations
import math
import logging
from abc import ABC, abstractmethod
from typing import List

from tabulate import tabulate

from fmspy.constants import MANAGED_SPEED_TYPE
from fmspy.guidance.vnav.computationparameters import VerticalProfileComputationParameters
from fmspy.guidance.vnav.constraintreader import MaxSpeedConstraint

logger = logging.getLogger("SpeedProfile")


class SpeedProfile(ABC):

    @abstractmethod
    def getTarget(self, distanceFromStart: float, altitude: float, managedSpeedType: MANAGED_SPEED_TYPE) -> float:
        """
        Speed target in kn CAS at distanceFromStart and altitude.
        """

    @abstractmethod
    def getCurrentSpeedTarget(self) -> float:
        pass

    @abstractmethod
    def shouldTakeClimbSpeedLimitIntoAccount(self) -> bool:
        pass

    @abstractmethod
    def shouldTakeDescentSpeedLimitIntoAccount(self) -> bool:
        pass


class McduSpeedProfile(SpeedProfile):
    """
    Managed speeds, limited by the speed limits and by the speed constraints of the flight plan.
    A climb speed constraint applies up to its waypoint, a descent speed constraint from its waypoint on.
    """
    def __init__(self, parameters: VerticalProfileComputationParameters, aircraftDistanceFromStart: float,
                 maxClimbSpeedConstraints: List[MaxSpeedConstraint], descentSpeedConstraints: List[MaxSpeedConstraint]):
        self.parameters = parameters
        self.aircraftDistanceFromStart = aircraftDistanceFromStart
        self.maxClimbSpeedConstraints = maxClimbSpeedConstraints
        self.descentSpeedConstraints = descentSpeedConstraints

    def managedSpeed(self, managedSpeedType: MANAGED_SPEED_TYPE) -> float:
        p = self.parameters
        if managedSpeedType == MANAGED_SPEED_TYPE.CLIMB:
            return p.managedClimbSpeed
        if managedSpeedType == MANAGED_SPEED_TYPE.DESCENT:
            return p.managedDescentSpeed
        return p.managedCruiseSpeed

    def getTarget(self, distanceFromStart: float, altitude: float, managedSpeedType: MANAGED_SPEED_TYPE) -> float:
        p = self.parameters
        speed = self.managedSpeed(managedSpeedType)

        if managedSpeedType == MANAGED_SPEED_TYPE.CLIMB:
            if self.shouldTakeClimbSpeedLimitIntoAccount() and altitude < p.climbSpeedLimitAltitude:
                speed = min(speed, p.climbSpeedLimit)
            speed = min(speed, self.findMaxClimbSpeedConstraint(distanceFromStart))
        elif managedSpeedType == MANAGED_SPEED_TYPE.DESCENT:
            if self.shouldTakeDescentSpeedLimitIntoAccount() and altitude < p.descentSpeedLimitAltitude:
                speed = min(speed, p.descentSpeedLimit)
            speed = min(speed, self.findMaxDescentSpeedConstraint(distanceFromStart))

        return speed

    def findMaxClimbSpeedConstraint(self, distanceFromStart: float) -> float:
        speeds = [c.maxSpeed for c in self.maxClimbSpeedConstraints if c.distanceFromStart >= distanceFromStart]
        return min(speeds) if len(speeds) > 0 else math.inf

    def findMaxDescentSpeedConstraint(self, distanceFromStart: float) -> float:
        speeds = [c.maxSpeed for c in self.descentSpeedConstraints if c.distanceFromStart <= distanceFromStart]
        return min(speeds) if len(speeds) > 0 else math.inf

    def getCurrentSpeedTarget(self) -> float:
        """
        Most restrictive speed constraint ahead of the aircraft.
        """
        return min(self.findMaxClimbSpeedConstraint(self.aircraftDistanceFromStart),
                   self.findMaxDescentSpeedConstraint(self.aircraftDistanceFromStart))

    def shouldTakeClimbSpeedLimitIntoAccount(self) -> bool:
        return self.parameters.climbSpeedLimit is not None and self.parameters.climbSpeedLimit > 0

    def shouldTakeDescentSpeedLimitIntoAccount(self) -> bool:
        return self.parameters.descentSpeedLimit is not None and self.parameters.descentSpeedLimit > 0

    def tabulate(self) -> str:
        table = [["climb", round(c.distanceFromStart, 1), c.maxSpeed] for c in self.maxClimbSpeedConstraints]
        table = table + [["descent", round(c.distanceFromStart, 1), c.maxSpeed] for c in self.descentSpeedConstraints]
        return tabulate(table, headers=["phase", "distance", "max speed"])


class NdSpeedProfile(McduSpeedProfile):
    """
    Selected speed if any, managed speed otherwise. Speed constraints are not obeyed.
    """
    def getTarget(self, distanceFromStart: float, altitude: float, managedSpeedType: MANAGED_SPEED_TYPE) -> float:
        fcuSpeed = self.parameters.fcuSpeed
        if fcuSpeed is not None and fcuSpeed > 0:
            return fcuSpeed
        p = self.parameters
        speed = self.managedSpeed(managedSpeedType)
        if managedSpeedType == MANAGED_SPEED_TYPE.CLIMB and self.shouldTakeClimbSpeedLimitIntoAccount() and altitude < p.climbSpeedLimitAltitude:
            speed = min(speed, p.climbSpeedLimit)
        elif managedSpeedType == MANAGED_SPEED_TYPE.DESCENT and self.shouldTakeDescentSpeedLimitIntoAccount() and altitude < p.descentSpeedLimitAltitude:
            speed = min(speed, p.descentSpeedLimit)
        return speed

    def getCurrentSpeedTarget(self) -> float:
        return math.inf


class ExpediteSpeedProfile(SpeedProfile):
    """
    Climb at green dot speed.
    """
    def __init__(self, greenDotSpeed: float):
        self.greenDotSpeed = greenDotSpeed

    def getTarget(self, distanceFromStart: float, altitude: float, managedSpeedType: MANAGED_SPEED_TYPE) -> float:
        return self.greenDotSpeed

    def getCurrentSpeedTarget(self) -> float:
        return math.inf

    def shouldTakeClimbSpeedLimitIntoAccount(self) -> bool:
        return False

    def shouldTakeDescentSpeedLimitIntoAccount(self) -> bool:
        return False
