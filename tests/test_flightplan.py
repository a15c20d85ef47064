import pytest

from fmspy.constants import LEG_TYPE, TRUNC_DEPARTURE, TRUNC_ARRIVAL
from fmspy.exceptions import IndexOutOfBoundsError, InvalidSegmentError, NotALegError, SegmentContentError, UnknownProcedureError
from fmspy.flightplan import FlightPlan, Discontinuity

from conftest import FIXES, legsInto


def _idents(segment) -> list:
    return ["DISC" if e.isDiscontinuity else e.ident for e in segment.allLegs]


def test_segment_position_and_global_index_agree(enrouteFlightPlanService):
    fp = enrouteFlightPlanService.active
    assert fp.legCount > 0
    for i in range(fp.legCount):
        segment, indexInSegment = fp.segmentPositionForIndex(i)
        assert fp.globalIndexOf(segment, indexInSegment) == i
        assert fp.elementAt(i) is segment.allLegs[indexInSegment]


def test_index_out_of_bounds(enrouteFlightPlanService):
    fp = enrouteFlightPlanService.active
    with pytest.raises(IndexOutOfBoundsError):
        fp.segmentPositionForIndex(-1)
    with pytest.raises(IndexOutOfBoundsError):
        fp.segmentPositionForIndex(fp.legCount)
    with pytest.raises(IndexOutOfBoundsError):
        fp.elementAt(fp.legCount)
    assert fp.maybeElementAt(fp.legCount) is None


def test_global_index_of_foreign_segment(flightPlan, navdb):
    other = FlightPlan(navdb=navdb)
    with pytest.raises(InvalidSegmentError):
        flightPlan.globalIndexOf(other.enrouteSegment, 0)


def test_previous_and_next_non_empty_segments(enrouteFlightPlanService, navdb):
    fp = enrouteFlightPlanService.active
    assert fp.previousSegment(fp.enrouteSegment) is fp.originSegment
    assert fp.nextSegment(fp.enrouteSegment) is fp.destinationSegment
    assert fp.previousSegment(fp.originSegment) is None
    assert fp.nextSegment(fp.destinationSegment) is None
    assert fp.destinationLegIndex == fp.legCount - 1
    with pytest.raises(InvalidSegmentError):
        fp.nextSegment(FlightPlan(navdb=navdb).enrouteSegment)


def test_leg_element_at_discontinuity(enrouteFlightPlanService):
    fp = enrouteFlightPlanService.active
    # origin is not strung to the enroute segment
    assert fp.elementAt(1).isDiscontinuity
    with pytest.raises(NotALegError):
        fp.legElementAt(1)
    assert fp.legElementAt(0).ident == "AAAA09"


def test_enroute_fixes_start_with_initial_fix(enrouteFlightPlanService):
    enroute = enrouteFlightPlanService.active.enrouteSegment
    assert enroute.allLegs[0].type == LEG_TYPE.IF
    assert all([e.type == LEG_TYPE.TF for e in enroute.allLegs[1:] if not e.isDiscontinuity])
    assert _idents(enroute) == ["WPT0", "WPT1", "WPT2", "WPT3", "DISC"]


def test_strung_segments_exclude_missed_approach(flightPlan):
    assert len(flightPlan.orderedSegments) == 12
    assert flightPlan.missedApproachSegment not in flightPlan.strungSegments
    assert flightPlan.strungSegments[-1] is flightPlan.destinationSegment


def test_unknown_airport(flightPlan):
    with pytest.raises(UnknownProcedureError):
        flightPlan.setOriginAirport("ZZZZ")


def test_departure_from_runway_end_needs_no_discontinuity(flightPlan):
    flightPlan.setOriginAirport("AAAA")
    flightPlan.setOriginRunway("09")
    flightPlan.setDeparture("DEP1")
    assert _idents(flightPlan.originSegment) == ["AAAA09"]
    assert flightPlan.originSegment.strung
    assert flightPlan.departureRunwayTransitionSegment.allLegs[0].type == LEG_TYPE.CA


def test_clearing_departure_strings_origin_to_destination(flightPlan):
    flightPlan.setOriginAirport("AAAA")
    flightPlan.setOriginRunway("09")
    flightPlan.setDeparture("DEP1")
    flightPlan.setDestinationAirport("BBBB")
    assert flightPlan.originSegment.strung

    flightPlan.setDeparture(None)

    assert flightPlan.departureRunwayTransitionSegment.isEmpty()
    assert flightPlan.departureSegment.isEmpty()
    assert not flightPlan.originSegment.strung
    assert _idents(flightPlan.originSegment) == ["AAAA09", "DISC"]
    assert ["DISC" if e.isDiscontinuity else e.ident for e in flightPlan.allLegs] == ["AAAA09", "DISC", "BBBB"]


def test_new_segment_strings_previous_segment_again(flightPlan):
    flightPlan.setOriginAirport("AAAA")
    flightPlan.setOriginRunway("09")
    flightPlan.setDeparture("DEP1")
    flightPlan.setDeparture(None)
    assert _idents(flightPlan.originSegment) == ["AAAA09", "DISC"]
    assert not flightPlan.originSegment.strung

    # the runway transition starts from the runway end again
    flightPlan.setDeparture("DEP1")

    assert _idents(flightPlan.originSegment) == ["AAAA09"]
    assert flightPlan.originSegment.strung


def test_set_origin_airport_clears_procedures(flightPlan):
    flightPlan.setOriginAirport("AAAA")
    flightPlan.setOriginRunway("09")
    flightPlan.setDeparture("DEP1")
    flightPlan.setDestinationAirport("BBBB")
    flightPlan.setDestinationRunway("27")
    flightPlan.setArrival("ARR1")
    flightPlan.setApproach("R27")
    assert not flightPlan.departureSegment.isEmpty()
    assert not flightPlan.arrivalSegment.isEmpty()
    assert not flightPlan.missedApproachSegment.isEmpty()

    version = flightPlan.version
    flightPlan.setOriginAirport("AAAA")

    for segment in [flightPlan.departureRunwayTransitionSegment, flightPlan.departureSegment,
                    flightPlan.departureEnrouteTransitionSegment, flightPlan.enrouteSegment,
                    flightPlan.arrivalEnrouteTransitionSegment, flightPlan.arrivalSegment,
                    flightPlan.arrivalRunwayTransitionSegment, flightPlan.approachViaSegment,
                    flightPlan.approachSegment, flightPlan.missedApproachSegment]:
        assert segment.isEmpty(), segment
    assert flightPlan.originDeparture is None
    assert flightPlan.arrival is None
    assert flightPlan.approach is None
    assert _idents(flightPlan.originSegment)[0] == "AAAA"
    assert flightPlan.version > version


def test_stringing_drops_duplicate_legs(flightPlan):
    enroute = flightPlan.enrouteSegment
    arrival = flightPlan.arrivalSegment
    enroute.allLegs = legsInto(enroute, ["WPT0"], LEG_TYPE.IF) + legsInto(enroute, ["WPT1", "WPT2"])
    arrival.allLegs = legsInto(arrival, ["D1"], LEG_TYPE.IF) + legsInto(arrival, ["WPT2", "WPT3"])

    flightPlan.stringSegmentsForwards(enroute, arrival)

    assert _idents(enroute) == ["WPT0", "WPT1"]
    assert _idents(arrival) == ["WPT2", "WPT3"]
    assert enroute.strung


def test_stringing_skips_discontinuity_before_shared_fix(flightPlan):
    enroute = flightPlan.enrouteSegment
    arrival = flightPlan.arrivalSegment
    enroute.allLegs = legsInto(enroute, ["WPT0"], LEG_TYPE.IF) + legsInto(enroute, ["WPT1", "WPT2"])
    arrival.allLegs = legsInto(arrival, ["D1"], LEG_TYPE.IF) + [Discontinuity()] \
        + legsInto(arrival, ["WPT3"], LEG_TYPE.IF) + legsInto(arrival, ["WPT2", "FF27"])

    flightPlan.stringSegmentsForwards(enroute, arrival)

    assert enroute.strung
    assert _idents(enroute) == ["WPT0", "WPT1"]
    assert _idents(arrival) == ["WPT2", "FF27"]
    assert [e.isDiscontinuity for e in flightPlan.allLegs] == [False] * 4


def test_stringing_without_common_fix_adds_one_discontinuity(flightPlan):
    enroute = flightPlan.enrouteSegment
    arrival = flightPlan.arrivalSegment
    enroute.allLegs = legsInto(enroute, ["WPT0"], LEG_TYPE.IF) + legsInto(enroute, ["WPT1"])
    arrival.allLegs = legsInto(arrival, ["WPT2"], LEG_TYPE.IF) + legsInto(arrival, ["WPT3"])

    flightPlan.stringSegmentsForwards(enroute, arrival)
    flightPlan.stringSegmentsForwards(enroute, arrival)

    assert _idents(enroute) == ["WPT0", "WPT1", "DISC"]
    assert not enroute.strung
    assert _idents(arrival) == ["WPT2", "WPT3"]


def test_stringing_segment_with_only_a_discontinuity(flightPlan):
    enroute = flightPlan.enrouteSegment
    arrival = flightPlan.arrivalSegment
    enroute.allLegs = [Discontinuity()]
    arrival.allLegs = legsInto(arrival, ["WPT2"], LEG_TYPE.IF)
    with pytest.raises(SegmentContentError):
        flightPlan.stringSegmentsForwards(enroute, arrival)


def test_stringing_ignores_empty_segments(flightPlan):
    enroute = flightPlan.enrouteSegment
    enroute.allLegs = legsInto(enroute, ["WPT0"], LEG_TYPE.IF)
    flightPlan.stringSegmentsForwards(enroute, flightPlan.arrivalSegment)
    flightPlan.stringSegmentsForwards(None, enroute)
    assert _idents(enroute) == ["WPT0"]


def test_enroute_strung_to_arrival_on_shared_fix(flightPlan):
    flightPlan.setOriginAirport("AAAA")
    flightPlan.setDestinationAirport("BBBB")
    flightPlan.setEnrouteFixes([FIXES["WPT0"], FIXES["WPT1"]])
    assert _idents(flightPlan.enrouteSegment)[-1] == "DISC"

    flightPlan.setArrival("ARR1")

    assert flightPlan.enrouteSegment.strung
    assert _idents(flightPlan.enrouteSegment) == ["WPT0"]
    assert _idents(flightPlan.arrivalSegment)[:3] == ["WPT1", "WPT2", "WPT3"]
    # no discontinuity between the last enroute leg and the first arrival leg
    start = flightPlan.globalIndexOf(flightPlan.enrouteSegment, 0)
    end = flightPlan.globalIndexOf(flightPlan.arrivalSegment, 2)
    assert not any([flightPlan.elementAt(i).isDiscontinuity for i in range(start, end + 1)])
    assert [flightPlan.elementAt(i).ident for i in range(start, end + 1)] == ["WPT0", "WPT1", "WPT2", "WPT3"]


def _departurePlan(flightPlan) -> FlightPlan:
    origin = flightPlan.originSegment
    origin.allLegs = legsInto(origin, ["D1"], LEG_TYPE.IF)
    drt = flightPlan.departureRunwayTransitionSegment
    drt.allLegs = legsInto(drt, ["WPT0"])
    departure = flightPlan.departureSegment
    departure.allLegs = legsInto(departure, ["WPT1"])
    det = flightPlan.departureEnrouteTransitionSegment
    det.allLegs = legsInto(det, ["WPT2"])
    enroute = flightPlan.enrouteSegment
    enroute.allLegs = legsInto(enroute, ["WPT3"])
    return flightPlan


def test_remove_departure_leg_moves_rest_of_departure_into_enroute(flightPlan):
    fp = _departurePlan(flightPlan)
    version = fp.version

    fp.removeElementAt(1)

    assert fp.departureRunwayTransitionSegment.isEmpty()
    assert fp.departureSegment.isEmpty()
    assert fp.departureEnrouteTransitionSegment.isEmpty()
    assert _idents(fp.enrouteSegment) == ["WPT1", "WPT2", "WPT3"]
    moved = fp.enrouteSegment.allLegs[:2]
    assert all([leg.annotation == TRUNC_DEPARTURE for leg in moved])
    assert all([leg.segment is fp.enrouteSegment for leg in moved])
    assert fp.enrouteSegment.allLegs[2].annotation == ""
    assert fp.version > version


def test_departure_truncation_keeps_legs_before_cut(flightPlan):
    fp = _departurePlan(flightPlan)
    departure = fp.departureSegment
    departure.allLegs = departure.allLegs + legsInto(departure, ["FF27"])

    # cut at the second leg of the departure segment
    fp.redistributeLegsAt(fp.globalIndexOf(departure, 1))

    assert _idents(fp.departureRunwayTransitionSegment) == ["WPT0"]
    assert _idents(departure) == ["WPT1"]
    assert fp.departureEnrouteTransitionSegment.isEmpty()
    assert _idents(fp.enrouteSegment) == ["FF27", "WPT2", "WPT3"]
    assert fp.enrouteSegment.allLegs[0].annotation == TRUNC_DEPARTURE


def test_arrival_truncation_moves_legs_from_cut(flightPlan):
    fp = flightPlan
    enroute = fp.enrouteSegment
    enroute.allLegs = legsInto(enroute, ["D1"], LEG_TYPE.IF)
    aet = fp.arrivalEnrouteTransitionSegment
    aet.allLegs = legsInto(aet, ["WPT0"])
    arrival = fp.arrivalSegment
    arrival.allLegs = legsInto(arrival, ["WPT1", "WPT2"])
    approach = fp.approachSegment
    approach.allLegs = legsInto(approach, ["WPT3", "FF27"])

    # cut at the second arrival leg
    fp.redistributeLegsAt(fp.globalIndexOf(arrival, 1))

    assert aet.isEmpty()
    assert _idents(arrival) == ["WPT1"]
    assert _idents(approach) == ["WPT3", "FF27"]
    assert _idents(enroute) == ["D1", "WPT0", "WPT2"]
    assert [leg.annotation for leg in enroute.allLegs[1:]] == [TRUNC_ARRIVAL, TRUNC_ARRIVAL]
    assert all([leg.segment is enroute for leg in enroute.allLegs])


def test_approach_truncation_moves_legs_from_cut(flightPlan):
    fp = flightPlan
    enroute = fp.enrouteSegment
    enroute.allLegs = legsInto(enroute, ["D1"], LEG_TYPE.IF)
    approach = fp.approachSegment
    approach.allLegs = legsInto(approach, ["WPT1", "WPT2", "WPT3"])

    fp.redistributeLegsAt(fp.globalIndexOf(approach, 1))

    assert _idents(approach) == ["WPT1"]
    assert _idents(enroute) == ["D1", "WPT2", "WPT3"]
    assert [leg.annotation for leg in enroute.allLegs] == ["", TRUNC_ARRIVAL, TRUNC_ARRIVAL]


def test_remove_enroute_leg_does_not_redistribute(flightPlan):
    fp = _departurePlan(flightPlan)
    fp.removeElementAt(fp.globalIndexOf(fp.enrouteSegment, 0))
    assert fp.enrouteSegment.isEmpty()
    assert _idents(fp.departureSegment) == ["WPT1"]


def test_clone_is_structural_copy(enrouteFlightPlanService):
    fp = enrouteFlightPlanService.active
    copy = fp.clone()
    assert copy.version == fp.version
    assert [e.isDiscontinuity for e in copy.allLegs] == [e.isDiscontinuity for e in fp.allLegs]
    assert copy.enrouteSegment.allLegs[0] is not fp.enrouteSegment.allLegs[0]
    assert copy.enrouteSegment.allLegs[0].segment is copy.enrouteSegment

    copy.removeElementAt(copy.globalIndexOf(copy.enrouteSegment, 1))
    assert copy.legCount == fp.legCount - 1


def test_temporary_plan_insert(enrouteFlightPlanService):
    service = enrouteFlightPlanService
    version = service.active.version
    temporary = service.temporaryCreate()
    assert service.current is temporary
    temporary.removeElementAt(temporary.globalIndexOf(temporary.enrouteSegment, 1))

    ret = service.temporaryInsert()
    assert ret[0]
    assert service.active is temporary
    assert service.active.version > version
    assert not service.hasTemporary()
    assert not service.temporaryDelete()[0]


def test_waypoint_statistics_keyed_on_first_occurrence(enrouteFlightPlanService):
    fp = enrouteFlightPlanService.active
    stats = fp.computeWaypointStatistics()
    assert stats[0].ident == "AAAA09"
    assert [s.ident for s in stats.values()] == ["AAAA09", "WPT0", "WPT1", "WPT2", "WPT3", "BBBB27"]
