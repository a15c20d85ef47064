"""
Airports and runways as resolved by the navigation database.
"""
from __future__ import annotations
import logging
from typing import List

from fmspy.airspace.fix import Fix
from fmspy.airspace.procedure import SID, STAR, APPCH

logger = logging.getLogger("Airport")


class Runway(Fix):
    """
    A runway is represented by its threshold point.
    Bearing is the true runway heading, length in meters, elevation in feet.
    """
    def __init__(self, ident: str, airport: str, lat: float, lon: float, bearing: float, length: float = 0, elevation: float = 0):
        Fix.__init__(self, ident=ident, lat=lat, lon=lon, airport=airport)
        self.bearing = bearing
        self.length = length
        self.elevation = elevation


class Airport(Fix):
    """
    An airport with its runways and terminal procedures.
    Elevation is in feet.
    """
    def __init__(self, ident: str, lat: float, lon: float, elevation: float = 0,
                 runways: List[Runway] = None,
                 departures: List[SID] = None,
                 arrivals: List[STAR] = None,
                 approaches: List[APPCH] = None):
        Fix.__init__(self, ident=ident, lat=lat, lon=lon, airport=ident)
        self.elevation = elevation
        self.runways = runways if runways is not None else []
        self.departures = departures if departures is not None else []
        self.arrivals = arrivals if arrivals is not None else []
        self.approaches = approaches if approaches is not None else []

    def getRunway(self, ident: str) -> Runway | None:
        for r in self.runways:
            if r.ident == ident:
                return r
        logger.warning(f":getRunway: {self.ident} has no runway {ident}")
        return None
