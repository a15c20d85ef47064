#
from typing import NamedTuple

from fmspy.constants import CHECKPOINT_REASON


class VerticalCheckpoint(NamedTuple):
    """
    One point of the vertical profile.
    Distance in NM from the start of the geometry, altitude in ft, speed in kn CAS, fuel in lbs.
    """
    reason: CHECKPOINT_REASON
    distanceFromStart: float
    altitude: float
    speed: float
    secondsFromPresent: float
    remainingFuelOnBoard: float


class TimePrediction(NamedTuple):
    distanceFromStart: float
    altitude: float
    speed: float
    secondsFromPresent: float
