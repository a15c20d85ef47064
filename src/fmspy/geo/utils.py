#
import math
import logging

from geojson import Point

from fmspy.geo.turf import Feature, lat, lon

logger = logging.getLogger("geoutils")


def mk360(a):
    # Make angle in [0, 360[
    if a < 0:
        return mk360(a + 360)
    elif a >= 360:
        return mk360(a - 360)
    return a


def mk180(a):
    # Make angle in ]-180, 180]
    a = mk360(a)
    return a - 360 if a > 180 else a


def courseChange(inbound: float, outbound: float) -> float:
    """
    Signed course change from inbound to outbound course, in ]-180, 180].
    Positive values turn right.
    """
    return mk180(outbound - inbound)


def turnRadius(speed: float) -> float:
    """
    Standard rate turn radius in NM for a ground speed in knots.
    A standard turn is 360° in 2 minutes.
    """
    return speed * (120 / 3600) / (2 * math.pi)


def bankedTurnRadius(speed: float, bank: float) -> float:
    """
    Turn radius in NM for a ground speed in knots at the supplied bank angle in degrees.
    """
    ms = speed * 1852 / 3600
    r = ms * ms / (9.81 * math.tan(math.radians(bank)))
    return r / 1852


def line_intersect(p1, course1: float, p2, course2: float):
    """
    Intersection of two lines, each given by a point and a course, in a local flat approximation.
    Returns a Feature<Point> or None if lines are parallel or intersection is behind p1.
    """
    coslat = math.cos(math.radians((lat(p1) + lat(p2)) / 2))
    x1 = lon(p1) * coslat
    y1 = lat(p1)
    x3 = lon(p2) * coslat
    y3 = lat(p2)
    dx1 = math.sin(math.radians(course1))
    dy1 = math.cos(math.radians(course1))
    dx2 = math.sin(math.radians(course2))
    dy2 = math.cos(math.radians(course2))
    denom = dx1 * dy2 - dy1 * dx2
    if abs(denom) < 1e-9:
        return None
    uA = ((x3 - x1) * dy2 - (y3 - y1) * dx2) / denom
    if uA < 0:
        return None
    x = x1 + uA * dx1
    y = y1 + uA * dy1
    return Feature(geometry=Point((x / coslat, y)))
