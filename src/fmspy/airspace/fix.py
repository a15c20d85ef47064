"""
A Fix is a named geographic point: waypoint, navaid, airport reference point or runway threshold.
"""
import logging

from geojson import Point

from fmspy.geo.turf import Feature

logger = logging.getLogger("Fix")


class Fix(Feature):
    """
    A Fix is a GeoJSON Feature<Point> with an identifier.
    It carries no setters and is not modified once resolved.
    """
    def __init__(self, ident: str, lat: float, lon: float, region: str = None, airport: str = None):
        Feature.__init__(self, geometry=Point((lon, lat)), properties={"ident": ident,
                                                                     "region": region,
                                                                     "airport": airport})
        self.id = ident

    @property
    def ident(self) -> str:
        return self["properties"]["ident"]

    @property
    def region(self) -> str:
        return self["properties"]["region"]

    @property
    def airport(self) -> str:
        return self["properties"]["airport"]

    def lat(self) -> float:
        return self["geometry"]["coordinates"][1]

    def lon(self) -> float:
        return self["geometry"]["coordinates"][0]

    def key(self) -> tuple:
        """
        Normalized identity of the fix, used for structural comparison.
        """
        return (self.ident, round(self.lat(), 6), round(self.lon(), 6))

    def isSameFix(self, other) -> bool:
        return other is not None and isinstance(other, Fix) and self.key() == other.key()

    def __repr__(self):
        return f"Fix({self.ident} {round(self.lat(), 4)}/{round(self.lon(), 4)})"

    def __str__(self):
        return self.ident
