"""
A flight plan is an ordered list of twelve segments. Its leg sequence is the concatenation of the segment elements.
"""
from __future__ import annotations
import logging
from typing import Dict, List, NamedTuple, Tuple

from tabulate import tabulate

from fmspy.constants import DEPARTURE_CLASSES, ARRIVAL_CLASSES, TRUNC_DEPARTURE, TRUNC_ARRIVAL
from fmspy.exceptions import IndexOutOfBoundsError, InvalidSegmentError, SegmentContentError, NotALegError
from fmspy.parameters import DEBUG_FLIGHTPLAN
from fmspy.airspace import Fix, NavigationDatabase
from .leg import FlightPlanLeg, Discontinuity, FlightPlanElement
from .segments import (FlightPlanSegment, OriginSegment, DepartureRunwayTransitionSegment, DepartureSegment,
                       DepartureEnrouteTransitionSegment, EnrouteSegment, ArrivalEnrouteTransitionSegment,
                       ArrivalSegment, ArrivalRunwayTransitionSegment, ApproachViaSegment, ApproachSegment,
                       DestinationSegment, MissedApproachSegment)

logger = logging.getLogger("FlightPlan")


class WaypointStats(NamedTuple):
    ident: str
    bearingInFp: float = 0
    distanceInFp: float = 0
    distanceFromPpos: float = 0
    timeFromPpos: float = 0
    etaFromPpos: float = 0
    magneticVariation: float = 0


class FlightPlan:
    """
    Flight plan made of segments.
    All structural mutations go through this class or its segments and bump the version counter.
    """
    def __init__(self, navdb: NavigationDatabase = None):
        self.navdb = navdb
        self.version = 0
        self.activeLegIndex = 0

        self.originSegment = OriginSegment(self)
        self.departureRunwayTransitionSegment = DepartureRunwayTransitionSegment(self)
        self.departureSegment = DepartureSegment(self)
        self.departureEnrouteTransitionSegment = DepartureEnrouteTransitionSegment(self)
        self.enrouteSegment = EnrouteSegment(self)
        self.arrivalEnrouteTransitionSegment = ArrivalEnrouteTransitionSegment(self)
        self.arrivalSegment = ArrivalSegment(self)
        self.arrivalRunwayTransitionSegment = ArrivalRunwayTransitionSegment(self)
        self.approachViaSegment = ApproachViaSegment(self)
        self.approachSegment = ApproachSegment(self)
        self.destinationSegment = DestinationSegment(self)
        self.missedApproachSegment = MissedApproachSegment(self)

        self.availableOriginRunways = []
        self.availableDepartures = []
        self.availableDestinationRunways = []
        self.availableArrivals = []
        self.availableApproaches = []

    @property
    def orderedSegments(self) -> List[FlightPlanSegment]:
        return [
            self.originSegment,
            self.departureRunwayTransitionSegment,
            self.departureSegment,
            self.departureEnrouteTransitionSegment,
            self.enrouteSegment,
            self.arrivalEnrouteTransitionSegment,
            self.arrivalSegment,
            self.arrivalRunwayTransitionSegment,
            self.approachViaSegment,
            self.approachSegment,
            self.destinationSegment,
            self.missedApproachSegment
        ]

    def incrementVersion(self):
        self.version = self.version + 1

    #
    # Leg sequence
    #
    @property
    def allLegs(self) -> List[FlightPlanElement]:
        legs = []
        for s in self.orderedSegments:
            legs = legs + s.allLegs
        return legs

    @property
    def legCount(self) -> int:
        return sum([len(s.allLegs) for s in self.orderedSegments])

    def elementAt(self, index: int) -> FlightPlanElement:
        legs = self.allLegs
        if index < 0 or index >= len(legs):
            raise IndexOutOfBoundsError(index, len(legs))
        return legs[index]

    def legElementAt(self, index: int) -> FlightPlanLeg:
        element = self.elementAt(index)
        if element.isDiscontinuity:
            raise NotALegError(index)
        return element

    def maybeElementAt(self, index: int) -> FlightPlanElement | None:
        legs = self.allLegs
        if index < 0 or index >= len(legs):
            return None
        return legs[index]

    @property
    def originLeg(self) -> FlightPlanLeg | None:
        return self.originSegment.allLegs[0] if len(self.originSegment.allLegs) > 0 else None

    @property
    def destinationLegIndex(self) -> int:
        if len(self.destinationSegment.allLegs) == 0:
            return -1
        accumulator = 0
        for s in self.orderedSegments:
            if s is self.destinationSegment:
                break
            accumulator = accumulator + len(s.allLegs)
        return accumulator

    @property
    def destinationLeg(self) -> FlightPlanLeg | None:
        idx = self.destinationLegIndex
        return self.allLegs[idx] if idx >= 0 else None

    @property
    def firstMissedApproachLegIndex(self) -> int:
        return self.legCount - len(self.missedApproachSegment.allLegs)

    def segmentPositionForIndex(self, index: int) -> Tuple[FlightPlanSegment, int]:
        """
        Finds the segment and the index in segment of a global flight plan index.
        """
        if index < 0:
            raise IndexOutOfBoundsError(index, self.legCount)
        accumulator = 0
        for s in self.orderedSegments:
            accumulator = accumulator + len(s.allLegs)
            if accumulator > index:
                return (s, index - (accumulator - len(s.allLegs)))
        raise IndexOutOfBoundsError(index, self.legCount)

    def globalIndexOf(self, segment: FlightPlanSegment, indexInSegment: int) -> int:
        accumulator = 0
        for s in self.orderedSegments:
            if s is segment:
                return accumulator + indexInSegment
            accumulator = accumulator + len(s.allLegs)
        raise InvalidSegmentError(segment)

    @property
    def strungSegments(self) -> List[FlightPlanSegment]:
        """
        Segments flown in sequence, the missed approach is not part of them.
        """
        return self.orderedSegments[:-1]

    def _segmentIndex(self, segment: FlightPlanSegment) -> int:
        for i, s in enumerate(self.strungSegments):
            if s is segment:
                return i
        raise InvalidSegmentError(segment)

    def previousSegment(self, before: FlightPlanSegment) -> FlightPlanSegment | None:
        """
        Returns the last segment before the supplied one that contains at least one element.
        """
        segments = self.strungSegments
        i = self._segmentIndex(before) - 1
        while i >= 0:
            if len(segments[i].allLegs) > 0:
                return segments[i]
            i = i - 1
        return None

    def nextSegment(self, after: FlightPlanSegment) -> FlightPlanSegment | None:
        """
        Returns the first segment after the supplied one that contains at least one element.
        """
        segments = self.strungSegments
        i = self._segmentIndex(after) + 1
        while i < len(segments):
            if len(segments[i].allLegs) > 0:
                return segments[i]
            i = i + 1
        return None

    def computeWaypointStatistics(self) -> Dict[int, WaypointStats]:
        """
        Statistics per unique leg identifier, keyed on the first index of that identifier.
        Values are placeholders until predictions are attached.
        """
        stats = {}
        legs = self.allLegs
        first = {}
        for i, element in enumerate(legs):
            if element.isDiscontinuity:
                continue
            if element.ident not in first:
                first[element.ident] = i
            stats[first[element.ident]] = WaypointStats(ident=element.ident)
        return stats

    #
    # Origin, destination, procedures
    #
    @property
    def originAirport(self):
        return self.originSegment.originAirport

    @property
    def originRunway(self):
        return self.originSegment.originRunway

    @property
    def originDeparture(self):
        return self.departureSegment.originDeparture

    @property
    def departureRunwayTransition(self):
        return self.departureRunwayTransitionSegment.departureRunwayTransition

    @property
    def departureEnrouteTransition(self):
        return self.departureEnrouteTransitionSegment.departureEnrouteTransition

    @property
    def arrival(self):
        return self.arrivalSegment.arrivalProcedure

    @property
    def arrivalEnrouteTransition(self):
        return self.arrivalEnrouteTransitionSegment.arrivalEnrouteTransition

    @property
    def arrivalRunwayTransition(self):
        return self.arrivalRunwayTransitionSegment.arrivalRunwayTransition

    @property
    def approach(self):
        return self.approachSegment.approachProcedure

    @property
    def approachVia(self):
        return self.approachViaSegment.approachVia

    @property
    def destinationAirport(self):
        return self.destinationSegment.destinationAirport

    @property
    def destinationRunway(self):
        return self.destinationSegment.destinationRunway

    def setOriginAirport(self, ident: str):
        self.originSegment.setOriginIcao(ident)
        self.departureSegment.setDepartureProcedure(None)
        self.enrouteSegment.empty()
        self.arrivalSegment.setArrivalProcedure(None)
        self.approachSegment.setApproachProcedure(None)
        self.incrementVersion()

    def setOriginRunway(self, ident: str):
        self.originSegment.setOriginRunway(ident)

    def setDeparture(self, ident: str | None):
        self.departureSegment.setDepartureProcedure(ident)

    def setDepartureEnrouteTransition(self, ident: str | None):
        self.departureEnrouteTransitionSegment.setDepartureEnrouteTransition(ident)

    def setEnrouteFixes(self, fixes: List[Fix], airwayIdent: str = None):
        self.enrouteSegment.setEnrouteFixes(fixes, airwayIdent)

    def setDestinationAirport(self, ident: str):
        self.arrivalSegment.setArrivalProcedure(None)
        self.approachSegment.setApproachProcedure(None)
        self.enrouteSegment.empty()
        self.destinationSegment.setDestinationIcao(ident)
        self.incrementVersion()

    def setDestinationRunway(self, ident: str):
        self.destinationSegment.setDestinationRunway(ident)

    def setArrival(self, ident: str | None):
        self.arrivalSegment.setArrivalProcedure(ident)

    def setArrivalEnrouteTransition(self, ident: str | None):
        self.arrivalEnrouteTransitionSegment.setArrivalEnrouteTransition(ident)

    def setApproach(self, ident: str | None):
        self.approachSegment.setApproachProcedure(ident)

    def setApproachVia(self, ident: str | None):
        self.approachViaSegment.setApproachVia(ident)

    #
    # Structural edits
    #
    def removeElementAt(self, index: int) -> bool:
        """
        Removes the element at the global index. Removing from a departure or arrival procedure
        truncates the procedure at the cut, see redistributeLegsAt.
        """
        segment, indexInSegment = self.segmentPositionForIndex(index)
        del segment.allLegs[indexInSegment]
        if segment.segmentClass in DEPARTURE_CLASSES + ARRIVAL_CLASSES and index < self.legCount:
            self.redistributeLegsAt(index)
        self.incrementVersion()
        if DEBUG_FLIGHTPLAN:
            logger.debug(f":removeElementAt: removed element at {index}\n{self.tabulate()}")
        return True

    def redistributeLegsAt(self, index: int):
        """
        Redistributes elements at a cut point.
        In departure procedures, elements at or after the cut and all later departure elements are prepended to enroute.
        In arrival procedures, elements at or after the cut and all earlier arrival elements are appended to enroute.
        """
        segment, indexInSegment = self.segmentPositionForIndex(index)

        if segment.segmentClass in DEPARTURE_CLASSES:
            toInsertInEnroute = []
            emptyAllNext = False
            for s in [self.departureRunwayTransitionSegment, self.departureSegment, self.departureEnrouteTransitionSegment]:
                if s is segment:
                    emptyAllNext = True
                    toInsertInEnroute = toInsertInEnroute + s.truncate(indexInSegment)
                elif emptyAllNext:
                    toInsertInEnroute = toInsertInEnroute + s.empty()

            for element in toInsertInEnroute:
                if not element.isDiscontinuity:
                    element.annotation = TRUNC_DEPARTURE
                    element.setSegment(self.enrouteSegment)
            self.enrouteSegment.allLegs = toInsertInEnroute + self.enrouteSegment.allLegs
            logger.debug(f":redistributeLegsAt: moved {len(toInsertInEnroute)} departure elements into enroute")

        elif segment.segmentClass in ARRIVAL_CLASSES:
            toInsertInEnroute = []
            emptyAllNext = False
            for s in [self.approachSegment, self.approachViaSegment, self.arrivalRunwayTransitionSegment,
                      self.arrivalSegment, self.arrivalEnrouteTransitionSegment]:
                if s is segment:
                    emptyAllNext = True
                    toInsertInEnroute = s.truncate(indexInSegment) + toInsertInEnroute
                elif emptyAllNext:
                    toInsertInEnroute = s.empty() + toInsertInEnroute

            for element in toInsertInEnroute:
                if not element.isDiscontinuity:
                    element.annotation = TRUNC_ARRIVAL
                    element.setSegment(self.enrouteSegment)
            self.enrouteSegment.allLegs = self.enrouteSegment.allLegs + toInsertInEnroute
            logger.debug(f":redistributeLegsAt: moved {len(toInsertInEnroute)} arrival elements into enroute")

        self.incrementVersion()

    def stringSegmentsForwards(self, first: FlightPlanSegment | None, second: FlightPlanSegment | None):
        """
        Connects two consecutive segments: when the last leg of the first segment terminates at a fix
        also found in the second segment, the duplicate legs are dropped. Otherwise the first segment ends
        with a discontinuity.
        """
        if first is None or second is None:
            return
        if first.strung or len(first.allLegs) == 0 or len(second.allLegs) == 0:
            return

        lastElementInFirst = first.allLegs[-1]
        lastLegInFirst = lastElementInFirst
        if lastLegInFirst.isDiscontinuity:
            if len(first.allLegs) < 2 or first.allLegs[-2].isDiscontinuity:
                raise SegmentContentError(first)
            lastLegInFirst = first.allLegs[-2]

        cutBefore = -1
        firstLegInSecond = None
        for i, element in enumerate(second.allLegs):
            if element.isDiscontinuity:
                continue
            if firstLegInSecond is None:
                firstLegInSecond = element
            if lastLegInFirst.isXf() and element.isXf():
                if element.terminatesWithFix(lastLegInFirst.terminationFix()):
                    cutBefore = i
                    break

        if cutBefore == -1:
            if first is self.originSegment and second.segmentClass in DEPARTURE_CLASSES \
               and firstLegInSecond is not None and not firstLegInSecond.isXf():
                # departure starts from the runway end
                if lastElementInFirst.isDiscontinuity:
                    first.allLegs.pop()
                first.strung = True
                return
            if not lastElementInFirst.isDiscontinuity:
                first.allLegs.append(Discontinuity())
            first.strung = False
            self.incrementVersion()
            return

        if lastElementInFirst.isDiscontinuity:
            first.allLegs.pop()
        first.allLegs.pop()
        del second.allLegs[:cutBefore]
        first.strung = True
        self.incrementVersion()
        logger.debug(f":stringSegmentsForwards: {type(first).__name__} strung to {type(second).__name__} at {lastLegInFirst.ident}")

    #
    # Misc
    #
    def clone(self) -> FlightPlan:
        """
        Structural copy of the flight plan, legs are copied, navigation data is shared.
        """
        fp = FlightPlan(navdb=self.navdb)
        fp.version = self.version
        fp.activeLegIndex = self.activeLegIndex
        for name in ["originSegment", "departureRunwayTransitionSegment", "departureSegment",
                     "departureEnrouteTransitionSegment", "enrouteSegment", "arrivalEnrouteTransitionSegment",
                     "arrivalSegment", "arrivalRunwayTransitionSegment", "approachViaSegment",
                     "approachSegment", "destinationSegment", "missedApproachSegment"]:
            setattr(fp, name, getattr(self, name).clone(fp))
        fp.availableOriginRunways = self.availableOriginRunways
        fp.availableDepartures = self.availableDepartures
        fp.availableDestinationRunways = self.availableDestinationRunways
        fp.availableArrivals = self.availableArrivals
        fp.availableApproaches = self.availableApproaches
        return fp

    def tabulate(self) -> str:
        table = []
        idx = 0
        for s in self.orderedSegments:
            for e in s.allLegs:
                if e.isDiscontinuity:
                    table.append([idx, s.segmentType.value, "", "", "DISCONTINUITY", "", ""])
                else:
                    md = e.metadata()
                    table.append([idx, s.segmentType.value, e.type.value, e.ident, e.annotation,
                                  md.altitudeConstraint.getDesc() if md.altitudeConstraint is not None else "",
                                  md.speedConstraint.getDesc() if md.speedConstraint is not None else ""])
                idx = idx + 1
        return tabulate(table, headers=["index", "segment", "type", "ident", "annotation", "alt", "speed"])

    def __repr__(self):
        return f"FlightPlan(v{self.version}, {self.legCount} elements, active={self.activeLegIndex})"
