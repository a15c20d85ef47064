"""
Lateral geometry: leg primitives and transitions indexed by global flight plan leg index.
transitions[i] joins legs[i] to legs[i+1].
"""
from __future__ import annotations
import logging
from typing import Dict

from tabulate import tabulate

from fmspy.geo.turf import asFeatureCollection
from fmspy.guidance.lnav.legs import Leg
from fmspy.guidance.lnav.transitions import Transition

logger = logging.getLogger("Geometry")


class Geometry:

    def __init__(self, legs: Dict[int, Leg] = None, transitions: Dict[int, Transition] = None):
        self.legs = legs if legs is not None else {}
        self.transitions = transitions if transitions is not None else {}
        self.version = 0

    def copy(self) -> Geometry:
        """
        Shallow copy, primitives are shared.
        """
        g = Geometry(dict(self.legs), dict(self.transitions))
        g.version = self.version
        return g

    @property
    def legCount(self) -> int:
        return len(self.legs)

    def legDistance(self, index: int) -> float:
        """
        Leg length plus the length of its outbound transition, in NM.
        """
        leg = self.legs.get(index)
        if leg is None:
            return 0
        d = leg.distance
        tr = self.transitions.get(index)
        if tr is not None:
            d = d + tr.distance
        return d

    def totalDistance(self, fromIndex: int = 0) -> float:
        return sum([self.legDistance(i) for i in self.legs.keys() if i >= fromIndex])

    def distanceToEndOfLeg(self, index: int, fromIndex: int = 0) -> float:
        """
        Along track distance from the start of leg fromIndex to the end of leg index.
        """
        return sum([self.legDistance(i) for i in self.legs.keys() if fromIndex <= i <= index])

    def legIndexAtDistance(self, distance: float, fromIndex: int = 0) -> int | None:
        total = 0
        for i in sorted(self.legs.keys()):
            if i < fromIndex:
                continue
            total = total + self.legDistance(i)
            if total >= distance:
                return i
        return None

    def getFeatures(self):
        features = []
        for i in sorted(self.legs.keys()):
            f = self.legs[i].getFeature()
            if f is not None:
                f["properties"]["index"] = i
                features.append(f)
        return asFeatureCollection(features)

    def tabulate(self) -> str:
        table = []
        for i in sorted(self.legs.keys()):
            leg = self.legs[i]
            tr = self.transitions.get(i)
            table.append([i, leg.legType.value, leg.ident,
                          round(leg.initialCourse) if leg.initialCourse is not None else "",
                          round(leg.distance, 1),
                          type(tr).__name__ if tr is not None else "",
                          round(tr.distance, 1) if tr is not None else ""])
        return tabulate(table, headers=["index", "type", "ident", "course", "distance", "transition", "turn"])

    def __repr__(self):
        return f"Geometry({len(self.legs)} legs, {len(self.transitions)} transitions, {round(self.totalDistance(), 1)} NM)"
