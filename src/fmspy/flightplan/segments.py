"""
Flight plan segments.
A flight plan owns twelve segments in a fixed order. Each segment owns an ordered list of legs and discontinuities
and keeps a weak reference to its flight plan, resolved at call time.
"""
from __future__ import annotations
import logging
import weakref
from typing import List

from fmspy.constants import SEGMENT_CLASS, SEGMENT_TYPE, LEG_TYPE, MANUAL_TERMINATION_LEGS
from fmspy.exceptions import InvalidSegmentError, UnknownProcedureError
from fmspy.airspace import ProcedureLeg, ProcedureTransition, Fix
from .leg import FlightPlanLeg, Discontinuity

logger = logging.getLogger("FlightPlanSegment")


class FlightPlanSegment:
    """
    Base class of all segments.
    """
    segmentType = None
    segmentClass = None

    def __init__(self, flightPlan):
        self._flightPlan = weakref.ref(flightPlan)
        self.allLegs = []
        self.strung = False

    @property
    def flightPlan(self):
        fp = self._flightPlan()
        if fp is None:
            raise InvalidSegmentError(self, "Segment is no longer attached to a flight plan")
        return fp

    @property
    def legCount(self) -> int:
        return len(self.allLegs)

    def isEmpty(self) -> bool:
        return len(self.allLegs) == 0

    def truncate(self, fromIndex: int) -> list:
        """
        Removes and returns all elements at or after fromIndex.
        """
        removed = self.allLegs[fromIndex:]
        del self.allLegs[fromIndex:]
        return removed

    def empty(self) -> list:
        removed = self.allLegs[:]
        self.allLegs.clear()
        self.strung = False
        return removed

    def legsFromProcedure(self, legs: List[ProcedureLeg], procedureIdent: str = "") -> list:
        return [FlightPlanLeg.fromProcedureLeg(self, leg, procedureIdent) for leg in legs]

    def insertNecessaryDiscontinuities(self):
        """
        Legs with a manual termination are always followed by a discontinuity.
        """
        i = 0
        while i < len(self.allLegs):
            element = self.allLegs[i]
            if not element.isDiscontinuity and element.type in MANUAL_TERMINATION_LEGS:
                if i + 1 >= len(self.allLegs) or not self.allLegs[i + 1].isDiscontinuity:
                    self.allLegs.insert(i + 1, Discontinuity())
                i = i + 1
            i = i + 1

    def replaceLegs(self, elements: list):
        """
        Replaces all elements of the segment, then strings the segment with its non empty neighbours.
        The previous non empty segment is strung again, to the next non empty segment when this one is left empty.
        """
        fp = self.flightPlan
        previous = fp.previousSegment(self)
        if previous is not None and (len(elements) > 0 or not self.isEmpty()):
            previous.strung = False
        self.allLegs = list(elements)
        for e in self.allLegs:
            if not e.isDiscontinuity:
                e.setSegment(self)
        self.strung = False
        self.insertNecessaryDiscontinuities()
        if self.isEmpty():
            fp.stringSegmentsForwards(previous, fp.nextSegment(self))
        else:
            fp.stringSegmentsForwards(previous, self)
            fp.stringSegmentsForwards(self, fp.nextSegment(self))
        fp.incrementVersion()

    def copyInto(self, newSegment: FlightPlanSegment) -> FlightPlanSegment:
        newSegment.allLegs = [Discontinuity() if e.isDiscontinuity else e.clone(newSegment) for e in self.allLegs]
        newSegment.strung = self.strung
        return newSegment

    def clone(self, forPlan) -> FlightPlanSegment:
        return self.copyInto(type(self)(forPlan))

    def __repr__(self):
        return f"{type(self).__name__}({len(self.allLegs)} elements{', strung' if self.strung else ''})"


class OriginSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.ORIGIN
    segmentClass = SEGMENT_CLASS.ORIGIN

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.originAirport = None
        self.originRunway = None

    def setOriginIcao(self, ident: str):
        fp = self.flightPlan
        airport = fp.navdb.getAirport(ident) if fp.navdb is not None else None
        if airport is None:
            raise UnknownProcedureError("airport", ident)
        self.originAirport = airport
        self.originRunway = None
        fp.availableOriginRunways = airport.runways
        fp.availableDepartures = airport.departures
        self.replaceLegs([FlightPlanLeg.fromAirportAndRunway(self, airport)])
        logger.debug(f":setOriginIcao: origin set to {ident}")

    def setOriginRunway(self, ident: str):
        fp = self.flightPlan
        if self.originAirport is None:
            raise UnknownProcedureError("origin airport", None)
        runway = None
        for r in fp.availableOriginRunways:
            if r.ident == ident:
                runway = r
        if runway is None:
            raise UnknownProcedureError("runway", ident)
        self.originRunway = runway
        self.replaceLegs([FlightPlanLeg.fromAirportAndRunway(self, self.originAirport, runway)])
        departure = fp.departureSegment.originDeparture
        if departure is not None:
            fp.departureRunwayTransitionSegment.setDepartureRunwayTransition(departure.getRunwayTransition(ident))

    def clone(self, forPlan) -> OriginSegment:
        s = self.copyInto(OriginSegment(forPlan))
        s.originAirport = self.originAirport
        s.originRunway = self.originRunway
        return s


class DepartureRunwayTransitionSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.DEPARTURE_RUNWAY_TRANSITION
    segmentClass = SEGMENT_CLASS.DEPARTURE

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.departureRunwayTransition = None

    def setDepartureRunwayTransition(self, transition: ProcedureTransition | None):
        self.departureRunwayTransition = transition
        legs = self.legsFromProcedure(transition.legs, transition.ident) if transition is not None else []
        self.replaceLegs(legs)

    def clone(self, forPlan) -> DepartureRunwayTransitionSegment:
        s = self.copyInto(DepartureRunwayTransitionSegment(forPlan))
        s.departureRunwayTransition = self.departureRunwayTransition
        return s


class DepartureSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.DEPARTURE
    segmentClass = SEGMENT_CLASS.DEPARTURE

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.originDeparture = None

    def setDepartureProcedure(self, ident: str | None):
        fp = self.flightPlan
        if ident is None:
            self.originDeparture = None
            fp.departureEnrouteTransitionSegment.setDepartureEnrouteTransition(None)
            fp.departureRunwayTransitionSegment.setDepartureRunwayTransition(None)
            self.replaceLegs([])
            return

        departure = None
        for d in fp.availableDepartures:
            if d.ident == ident:
                departure = d
        if departure is None:
            raise UnknownProcedureError("departure", ident)

        self.originDeparture = departure
        # dependent segments are emptied first so that stringing only sees the new procedure
        fp.departureEnrouteTransitionSegment.departureEnrouteTransition = None
        fp.departureEnrouteTransitionSegment.empty()
        self.empty()

        runway = fp.originSegment.originRunway
        transition = departure.getRunwayTransition(runway.ident) if runway is not None else None
        fp.departureRunwayTransitionSegment.setDepartureRunwayTransition(transition)
        self.replaceLegs(self.legsFromProcedure(departure.legs, departure.ident))
        logger.debug(f":setDepartureProcedure: departure set to {ident}")

    def clone(self, forPlan) -> DepartureSegment:
        s = self.copyInto(DepartureSegment(forPlan))
        s.originDeparture = self.originDeparture
        return s


class DepartureEnrouteTransitionSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.DEPARTURE_ENROUTE_TRANSITION
    segmentClass = SEGMENT_CLASS.DEPARTURE

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.departureEnrouteTransition = None

    def setDepartureEnrouteTransition(self, ident: str | None):
        fp = self.flightPlan
        if ident is None:
            self.departureEnrouteTransition = None
            self.replaceLegs([])
            return
        departure = fp.departureSegment.originDeparture
        transition = departure.getEnrouteTransition(ident) if departure is not None else None
        if transition is None:
            raise UnknownProcedureError("departure enroute transition", ident)
        self.departureEnrouteTransition = transition
        self.replaceLegs(self.legsFromProcedure(transition.legs, transition.ident))

    def clone(self, forPlan) -> DepartureEnrouteTransitionSegment:
        s = self.copyInto(DepartureEnrouteTransitionSegment(forPlan))
        s.departureEnrouteTransition = self.departureEnrouteTransition
        return s


class EnrouteSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.ENROUTE
    segmentClass = SEGMENT_CLASS.ENROUTE

    def setEnrouteFixes(self, fixes: List[Fix], airwayIdent: str = None):
        """
        Replaces the enroute segment with a route through the supplied fixes.
        The first fix starts the route with an initial fix leg.
        """
        legs = []
        for f in fixes:
            legType = LEG_TYPE.IF if len(legs) == 0 else LEG_TYPE.TF
            legs.append(FlightPlanLeg.fromFix(self, f, legType=legType, airwayIdent=airwayIdent))
        self.replaceLegs(legs)


class ArrivalEnrouteTransitionSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.ARRIVAL_ENROUTE_TRANSITION
    segmentClass = SEGMENT_CLASS.ARRIVAL

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.arrivalEnrouteTransition = None

    def setArrivalEnrouteTransition(self, ident: str | None):
        fp = self.flightPlan
        if ident is None:
            self.arrivalEnrouteTransition = None
            self.replaceLegs([])
            return
        arrival = fp.arrivalSegment.arrivalProcedure
        transition = arrival.getEnrouteTransition(ident) if arrival is not None else None
        if transition is None:
            raise UnknownProcedureError("arrival enroute transition", ident)
        self.arrivalEnrouteTransition = transition
        self.replaceLegs(self.legsFromProcedure(transition.legs, transition.ident))

    def clone(self, forPlan) -> ArrivalEnrouteTransitionSegment:
        s = self.copyInto(ArrivalEnrouteTransitionSegment(forPlan))
        s.arrivalEnrouteTransition = self.arrivalEnrouteTransition
        return s


class ArrivalSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.ARRIVAL
    segmentClass = SEGMENT_CLASS.ARRIVAL

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.arrivalProcedure = None

    def setArrivalProcedure(self, ident: str | None):
        fp = self.flightPlan
        if ident is None:
            self.arrivalProcedure = None
            fp.arrivalEnrouteTransitionSegment.setArrivalEnrouteTransition(None)
            fp.arrivalRunwayTransitionSegment.setArrivalRunwayTransition(None)
            self.replaceLegs([])
            return

        arrival = None
        for a in fp.availableArrivals:
            if a.ident == ident:
                arrival = a
        if arrival is None:
            raise UnknownProcedureError("arrival", ident)

        self.arrivalProcedure = arrival
        fp.arrivalEnrouteTransitionSegment.arrivalEnrouteTransition = None
        fp.arrivalEnrouteTransitionSegment.empty()
        fp.arrivalRunwayTransitionSegment.arrivalRunwayTransition = None
        fp.arrivalRunwayTransitionSegment.empty()

        self.replaceLegs(self.legsFromProcedure(arrival.legs, arrival.ident))
        runway = fp.destinationSegment.destinationRunway
        if runway is not None:
            fp.arrivalRunwayTransitionSegment.setArrivalRunwayTransition(arrival.getRunwayTransition(runway.ident))
        logger.debug(f":setArrivalProcedure: arrival set to {ident}")

    def clone(self, forPlan) -> ArrivalSegment:
        s = self.copyInto(ArrivalSegment(forPlan))
        s.arrivalProcedure = self.arrivalProcedure
        return s


class ArrivalRunwayTransitionSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.ARRIVAL_RUNWAY_TRANSITION
    segmentClass = SEGMENT_CLASS.ARRIVAL

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.arrivalRunwayTransition = None

    def setArrivalRunwayTransition(self, transition: ProcedureTransition | None):
        self.arrivalRunwayTransition = transition
        legs = self.legsFromProcedure(transition.legs, transition.ident) if transition is not None else []
        self.replaceLegs(legs)

    def clone(self, forPlan) -> ArrivalRunwayTransitionSegment:
        s = self.copyInto(ArrivalRunwayTransitionSegment(forPlan))
        s.arrivalRunwayTransition = self.arrivalRunwayTransition
        return s


class ApproachViaSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.APPROACH_VIA
    segmentClass = SEGMENT_CLASS.APPROACH

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.approachVia = None

    def setApproachVia(self, ident: str | None):
        fp = self.flightPlan
        if ident is None:
            self.approachVia = None
            self.replaceLegs([])
            return
        approach = fp.approachSegment.approachProcedure
        via = approach.getVia(ident) if approach is not None else None
        if via is None:
            raise UnknownProcedureError("approach via", ident)
        self.approachVia = via
        self.replaceLegs(self.legsFromProcedure(via.legs, via.ident))

    def clone(self, forPlan) -> ApproachViaSegment:
        s = self.copyInto(ApproachViaSegment(forPlan))
        s.approachVia = self.approachVia
        return s


class ApproachSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.APPROACH
    segmentClass = SEGMENT_CLASS.APPROACH

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.approachProcedure = None

    def setApproachProcedure(self, ident: str | None):
        fp = self.flightPlan
        if ident is None:
            self.approachProcedure = None
            fp.approachViaSegment.setApproachVia(None)
            fp.missedApproachSegment.setMissedApproachLegs([])
            self.replaceLegs([])
            return

        approach = None
        for a in fp.availableApproaches:
            if a.ident == ident:
                approach = a
        if approach is None:
            raise UnknownProcedureError("approach", ident)

        self.approachProcedure = approach
        fp.approachViaSegment.approachVia = None
        fp.approachViaSegment.empty()
        self.replaceLegs(self.legsFromProcedure(approach.legs, approach.ident))
        fp.missedApproachSegment.setMissedApproachLegs(approach.missedApproachLegs, approach.ident)
        logger.debug(f":setApproachProcedure: approach set to {ident}")

    def clone(self, forPlan) -> ApproachSegment:
        s = self.copyInto(ApproachSegment(forPlan))
        s.approachProcedure = self.approachProcedure
        return s


class DestinationSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.DESTINATION
    segmentClass = SEGMENT_CLASS.DESTINATION

    def __init__(self, flightPlan):
        FlightPlanSegment.__init__(self, flightPlan)
        self.destinationAirport = None
        self.destinationRunway = None

    def setDestinationIcao(self, ident: str):
        fp = self.flightPlan
        airport = fp.navdb.getAirport(ident) if fp.navdb is not None else None
        if airport is None:
            raise UnknownProcedureError("airport", ident)
        self.destinationAirport = airport
        self.destinationRunway = None
        fp.availableDestinationRunways = airport.runways
        fp.availableArrivals = airport.arrivals
        fp.availableApproaches = airport.approaches
        self.replaceLegs([FlightPlanLeg.fromAirportAndRunway(self, airport)])
        logger.debug(f":setDestinationIcao: destination set to {ident}")

    def setDestinationRunway(self, ident: str):
        fp = self.flightPlan
        if self.destinationAirport is None:
            raise UnknownProcedureError("destination airport", None)
        runway = None
        for r in fp.availableDestinationRunways:
            if r.ident == ident:
                runway = r
        if runway is None:
            raise UnknownProcedureError("runway", ident)
        self.destinationRunway = runway
        self.replaceLegs([FlightPlanLeg.fromAirportAndRunway(self, self.destinationAirport, runway)])
        arrival = fp.arrivalSegment.arrivalProcedure
        if arrival is not None:
            fp.arrivalRunwayTransitionSegment.setArrivalRunwayTransition(arrival.getRunwayTransition(ident))

    def clone(self, forPlan) -> DestinationSegment:
        s = self.copyInto(DestinationSegment(forPlan))
        s.destinationAirport = self.destinationAirport
        s.destinationRunway = self.destinationRunway
        return s


class MissedApproachSegment(FlightPlanSegment):
    segmentType = SEGMENT_TYPE.MISSED_APPROACH
    segmentClass = SEGMENT_CLASS.MISSED_APPROACH

    def setMissedApproachLegs(self, legs: List[ProcedureLeg], procedureIdent: str = ""):
        self.replaceLegs(self.legsFromProcedure(legs, procedureIdent))

    def replaceLegs(self, elements: list):
        # the missed approach is flown after the destination and is not strung with it
        fp = self.flightPlan
        self.allLegs = list(elements)
        for e in self.allLegs:
            if not e.isDiscontinuity:
                e.setSegment(self)
        self.strung = False
        self.insertNecessaryDiscontinuities()
        fp.incrementVersion()
