# Wrapper around turfpy measurement functions.
# Points are always passed as GeoJSON Feature<Point>, lengths are requested in km and converted to NM.
#
from geojson import Point, LineString, FeatureCollection
from geojson import Feature as _Feature

from turfpy.measurement import distance as turf_distance
from turfpy.measurement import destination as turf_destination
from turfpy.measurement import bearing as turf_bearing

from fmspy.utils.unitconversion import convert


class Feature(_Feature):

    def __init__(self, geometry, properties: dict = None, **extra):
        self["type"] = "Feature"  # see https://github.com/jazzband/geojson/issues/178
        _Feature.__init__(self, geometry=geometry, properties=properties if properties is not None else {})
        if extra.get("id") is not None:
            self.id = extra.get("id")


def mkPoint(lat: float, lon: float, properties: dict = None) -> Feature:
    return Feature(geometry=Point((lon, lat)), properties=properties)


def lat(f) -> float:
    return f["geometry"]["coordinates"][1]


def lon(f) -> float:
    return f["geometry"]["coordinates"][0]


def distance(p1, p2, units: str = "km") -> float:
    return turf_distance(p1, p2, units)


def distance_nm(p1, p2) -> float:
    return convert.km_to_nm(turf_distance(p1, p2, "km"))


def bearing(p1, p2) -> float:
    return turf_bearing(p1, p2)


def destination(start, length: float, course: float, units: str = "km") -> Feature:
    # turfpy expects a bearing in [-180, 180]
    c = course - 360 if course > 180 else course
    d = turf_destination(start, length, c, {"units": units})
    return Feature(geometry=d["geometry"])


def destination_nm(start, length: float, course: float) -> Feature:
    return destination(start, convert.nm_to_km(length), course, "km")


def asLineString(points) -> LineString:
    return LineString([p["geometry"]["coordinates"] for p in points])


def asFeatureCollection(features) -> FeatureCollection:
    return FeatureCollection(features=features)
