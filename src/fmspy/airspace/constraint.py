"""
Altitude and speed constraints attached to procedure legs.
"""
from fmspy.constants import ALTITUDE_CONSTRAINT, SPEED_CONSTRAINT


class AltitudeConstraint:
    """
    Altitude constraint, altitudes in feet.
    For RANGE constraints, altitude1 is the upper and altitude2 the lower limit.
    """
    def __init__(self, ctype: ALTITUDE_CONSTRAINT, altitude1: float, altitude2: float = None):
        self.type = ctype
        self.altitude1 = altitude1
        self.altitude2 = altitude2

    def maxAltitude(self) -> float | None:
        if self.type in [ALTITUDE_CONSTRAINT.AT, ALTITUDE_CONSTRAINT.AT_OR_BELOW]:
            return self.altitude1
        if self.type == ALTITUDE_CONSTRAINT.RANGE:
            return max(self.altitude1, self.altitude2)
        return None

    def minAltitude(self) -> float | None:
        if self.type in [ALTITUDE_CONSTRAINT.AT, ALTITUDE_CONSTRAINT.AT_OR_ABOVE]:
            return self.altitude1
        if self.type == ALTITUDE_CONSTRAINT.RANGE:
            return min(self.altitude1, self.altitude2)
        return None

    def isMet(self, altitude: float, tolerance: float = 0) -> bool:
        amax = self.maxAltitude()
        amin = self.minAltitude()
        if amax is not None and altitude > amax + tolerance:
            return False
        if amin is not None and altitude < amin - tolerance:
            return False
        return True

    def key(self) -> tuple:
        return (self.type, self.altitude1, self.altitude2)

    def __eq__(self, other):
        return isinstance(other, AltitudeConstraint) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def getDesc(self) -> str:
        if self.type == ALTITUDE_CONSTRAINT.AT:
            return f"@{self.altitude1}"
        if self.type == ALTITUDE_CONSTRAINT.AT_OR_ABOVE:
            return f"+{self.altitude1}"
        if self.type == ALTITUDE_CONSTRAINT.AT_OR_BELOW:
            return f"-{self.altitude1}"
        return f"{self.minAltitude()}/{self.maxAltitude()}"

    def __repr__(self):
        return f"AltitudeConstraint({self.getDesc()})"


class SpeedConstraint:
    """
    Speed constraint, speed in knots.
    """
    def __init__(self, ctype: SPEED_CONSTRAINT, speed: float):
        self.type = ctype
        self.speed = speed

    def maxSpeed(self) -> float | None:
        if self.type in [SPEED_CONSTRAINT.AT, SPEED_CONSTRAINT.AT_OR_BELOW]:
            return self.speed
        return None

    def minSpeed(self) -> float | None:
        if self.type in [SPEED_CONSTRAINT.AT, SPEED_CONSTRAINT.AT_OR_ABOVE]:
            return self.speed
        return None

    def key(self) -> tuple:
        return (self.type, self.speed)

    def __eq__(self, other):
        return isinstance(other, SpeedConstraint) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def getDesc(self) -> str:
        prefix = {SPEED_CONSTRAINT.AT: "@", SPEED_CONSTRAINT.AT_OR_ABOVE: "+", SPEED_CONSTRAINT.AT_OR_BELOW: "-"}
        return f"{prefix[self.type]}{self.speed}"

    def __repr__(self):
        return f"SpeedConstraint({self.getDesc()})"
