from .turf import Feature, mkPoint, distance, distance_nm, bearing, destination, destination_nm, asLineString, asFeatureCollection
from .utils import mk360, mk180, courseChange, turnRadius, bankedTurnRadius, line_intersect
