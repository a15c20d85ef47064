"""
Numeric step primitives of the vertical profile.
Each step returns the distance travelled, altitude reached, fuel burned, time elapsed and speed
for a climb, descent, level or speed change segment, given a vertical speed and a fuel flow.
"""
from __future__ import annotations
import logging
from typing import NamedTuple

from fmspy.utils import casToTas, machToKn, tasToCas
from fmspy.utils.unitconversion import isaTemperature

logger = logging.getLogger("Predictions")


class StepResults(NamedTuple):
    """
    Distance in NM, altitudes in ft, fuel in lbs, time in seconds, speed in kn CAS.
    """
    initialAltitude: float
    finalAltitude: float
    distanceTraveled: float
    fuelBurned: float
    timeElapsed: float
    speed: float


class AtmosphericConditions:
    """
    Air mass the profile is computed in, expressed as an ISA temperature deviation.
    """
    def __init__(self, isaDeviation: float = 0):
        self.isaDeviation = isaDeviation

    def update(self, isaDeviation: float = None):
        if isaDeviation is not None:
            self.isaDeviation = isaDeviation

    def temperature(self, altitude: float) -> float:
        return isaTemperature(altitude, self.isaDeviation)

    def computeTasFromCas(self, altitude: float, cas: float) -> float:
        return casToTas(cas, altitude, self.isaDeviation)

    def computeCasFromTas(self, altitude: float, tas: float) -> float:
        return tasToCas(tas, altitude, self.isaDeviation)

    def computeTasFromMach(self, altitude: float, mach: float) -> float:
        return machToKn(mach, altitude, self.isaDeviation)


class Predictions:

    @staticmethod
    def trueAirspeed(altitude: float, speed: float, mach: float = None, isaDeviation: float = 0) -> float:
        """
        True airspeed for a CAS/Mach target pair, the lower of both applies.
        """
        tas = casToTas(speed, altitude, isaDeviation)
        if mach is not None and mach > 0:
            tas = min(tas, machToKn(mach, altitude, isaDeviation))
        return tas

    @staticmethod
    def altitudeStep(initialAltitude: float, altitudeChange: float, speed: float, mach: float,
                     verticalSpeed: float, fuelFlow: float, isaDeviation: float = 0) -> StepResults:
        """
        Climb or descent of altitudeChange feet at verticalSpeed, using conditions at mid altitude.
        """
        if altitudeChange == 0 or verticalSpeed == 0:
            return StepResults(initialAltitude, initialAltitude, 0, 0, 0, speed)
        midwayAltitude = initialAltitude + altitudeChange / 2
        tas = Predictions.trueAirspeed(midwayAltitude, speed, mach, isaDeviation)
        time = abs(altitudeChange / verticalSpeed) * 60
        return StepResults(initialAltitude=initialAltitude,
                           finalAltitude=initialAltitude + altitudeChange,
                           distanceTraveled=tas * time / 3600,
                           fuelBurned=fuelFlow * time / 3600,
                           timeElapsed=time,
                           speed=speed)

    @staticmethod
    def distanceStep(initialAltitude: float, distance: float, speed: float, mach: float,
                     verticalSpeed: float, fuelFlow: float, isaDeviation: float = 0) -> StepResults:
        """
        Flies distance NM at verticalSpeed from initialAltitude.
        """
        tas = Predictions.trueAirspeed(initialAltitude, speed, mach, isaDeviation)
        time = distance / tas * 3600 if tas > 0 else 0
        return StepResults(initialAltitude=initialAltitude,
                           finalAltitude=initialAltitude + verticalSpeed * time / 60,
                           distanceTraveled=distance,
                           fuelBurned=fuelFlow * time / 3600,
                           timeElapsed=time,
                           speed=speed)

    @staticmethod
    def reverseDistanceStep(finalAltitude: float, distance: float, speed: float, mach: float,
                            verticalSpeed: float, fuelFlow: float, isaDeviation: float = 0) -> StepResults:
        """
        Same as distanceStep but computed from the end of the segment.
        """
        tas = Predictions.trueAirspeed(finalAltitude, speed, mach, isaDeviation)
        time = distance / tas * 3600 if tas > 0 else 0
        return StepResults(initialAltitude=finalAltitude - verticalSpeed * time / 60,
                           finalAltitude=finalAltitude,
                           distanceTraveled=distance,
                           fuelBurned=fuelFlow * time / 3600,
                           timeElapsed=time,
                           speed=speed)

    @staticmethod
    def levelFlightStep(altitude: float, distance: float, speed: float, mach: float,
                        fuelFlow: float, isaDeviation: float = 0) -> StepResults:
        return Predictions.distanceStep(altitude, distance, speed, mach, 0, fuelFlow, isaDeviation)

    @staticmethod
    def speedChangeStep(initialAltitude: float, initialSpeed: float, finalSpeed: float, mach: float,
                        verticalSpeed: float, fuelFlow: float, accelerationRate: float, isaDeviation: float = 0) -> StepResults:
        """
        Acceleration or deceleration from initialSpeed to finalSpeed at accelerationRate kn/s while changing altitude at verticalSpeed.
        """
        if accelerationRate <= 0 or initialSpeed == finalSpeed:
            return StepResults(initialAltitude, initialAltitude, 0, 0, 0, finalSpeed)
        time = abs(finalSpeed - initialSpeed) / accelerationRate
        finalAltitude = initialAltitude + verticalSpeed * time / 60
        midwayAltitude = (initialAltitude + finalAltitude) / 2
        tas = Predictions.trueAirspeed(midwayAltitude, (initialSpeed + finalSpeed) / 2, mach, isaDeviation)
        return StepResults(initialAltitude=initialAltitude,
                           finalAltitude=finalAltitude,
                           distanceTraveled=tas * time / 3600,
                           fuelBurned=fuelFlow * time / 3600,
                           timeElapsed=time,
                           speed=finalSpeed)

    @staticmethod
    def reverseSpeedChangeStep(finalAltitude: float, initialSpeed: float, finalSpeed: float, mach: float,
                               verticalSpeed: float, fuelFlow: float, accelerationRate: float, isaDeviation: float = 0) -> StepResults:
        """
        Speed change computed from the end of the segment, the initial altitude is derived.
        """
        if accelerationRate <= 0 or initialSpeed == finalSpeed:
            return StepResults(finalAltitude, finalAltitude, 0, 0, 0, finalSpeed)
        time = abs(finalSpeed - initialSpeed) / accelerationRate
        initialAltitude = finalAltitude - verticalSpeed * time / 60
        midwayAltitude = (initialAltitude + finalAltitude) / 2
        tas = Predictions.trueAirspeed(midwayAltitude, (initialSpeed + finalSpeed) / 2, mach, isaDeviation)
        return StepResults(initialAltitude=initialAltitude,
                           finalAltitude=finalAltitude,
                           distanceTraveled=tas * time / 3600,
                           fuelBurned=fuelFlow * time / 3600,
                           timeElapsed=time,
                           speed=finalSpeed)
