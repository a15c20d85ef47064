import math
import logging

import pytest

from fmspy.constants import (CHECKPOINT_REASON, FLIGHT_PHASE, LATERAL_MODE, VERTICAL_MODE, ARMED_LATERAL_MODE,
                             ARMED_VERTICAL_MODE, ALTITUDE_CONSTRAINT, SPEED_CONSTRAINT, SEGMENT_TYPE)
from fmspy.parameters import (CONVERGENCE_MAX_ITERATIONS, CONVERGENCE_FUEL_TOLERANCE, CONVERGENCE_TIME_TOLERANCE,
                              DEFAULT_FUEL_AT_DESTINATION, DEFAULT_TIME_AT_DESTINATION)
from fmspy.airspace import AltitudeConstraint, SpeedConstraint
from fmspy.flightplan import LegMetadata
from fmspy.guidance.lnav import TFLeg
from fmspy.guidance.vnav import (VnavDriver, BaseGeometryProfile, VerticalCheckpoint, CruiseToDescentCoordinator,
                                CruisePathBuilderResults)

from conftest import straightGeometry


ROUTE = ["WPT0", "WPT1", "WPT2", "WPT3"]


def _driver(observer, geometry=None) -> VnavDriver:
    driver = VnavDriver(observer)
    driver.acceptMultipleLegGeometry(geometry if geometry is not None else straightGeometry(ROUTE), 0)
    return driver


def _reasons(profile) -> list:
    return [c.reason for c in profile.checkpoints]


def _constrainedGeometry(index: int, segmentType: SEGMENT_TYPE, altitudeConstraint=None, speedConstraint=None):
    """Straight route where the leg at index carries constraints."""
    geometry = straightGeometry(ROUTE)
    leg = geometry.legs[index]
    geometry.legs[index] = TFLeg(leg.fromFix, leg.fix,
                                 metadata=LegMetadata(altitudeConstraint=altitudeConstraint, speedConstraint=speedConstraint),
                                 segmentType=segmentType)
    return geometry


def _checkpoint(reason, distance, altitude, speed, seconds, fuel) -> VerticalCheckpoint:
    return VerticalCheckpoint(reason=reason, distanceFromStart=distance, altitude=altitude, speed=speed,
                              secondsFromPresent=seconds, remainingFuelOnBoard=fuel)


#
# Managed profile
#
def test_managed_profile_from_takeoff_to_landing(observer):
    driver = _driver(observer)
    profile = driver.currentNavGeometryProfile
    reasons = _reasons(profile)

    assert profile.isReadyToDisplay
    assert reasons[0] == CHECKPOINT_REASON.LIFTOFF
    assert reasons[-1] == CHECKPOINT_REASON.LANDING
    for reason in [CHECKPOINT_REASON.THRUST_REDUCTION_ALTITUDE, CHECKPOINT_REASON.CROSSING_CLIMB_SPEED_LIMIT,
                   CHECKPOINT_REASON.TOP_OF_CLIMB, CHECKPOINT_REASON.TOP_OF_DESCENT,
                   CHECKPOINT_REASON.CROSSING_DESCENT_SPEED_LIMIT, CHECKPOINT_REASON.DECEL]:
        assert reason in reasons, reason
    assert reasons.index(CHECKPOINT_REASON.TOP_OF_CLIMB) < reasons.index(CHECKPOINT_REASON.TOP_OF_DESCENT) < reasons.index(CHECKPOINT_REASON.DECEL)

    toc = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_CLIMB)
    tod = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
    landing = profile.findVerticalCheckpoint(CHECKPOINT_REASON.LANDING)
    assert toc.altitude == pytest.approx(20000)
    assert tod.altitude == pytest.approx(20000)
    assert landing.altitude == pytest.approx(250)
    assert landing.distanceFromStart == pytest.approx(profile.totalFlightPlanDistance)
    assert 0 < toc.distanceFromStart < tod.distanceFromStart < landing.distanceFromStart


def test_profile_is_ordered_along_path(observer):
    profile = _driver(observer).currentNavGeometryProfile
    distances = [c.distanceFromStart for c in profile.checkpoints]
    assert distances == sorted(distances)
    # time moves forward and fuel is burnt along the path, within convergence tolerances
    for c0, c1 in zip(profile.checkpoints, profile.checkpoints[1:]):
        assert c1.secondsFromPresent >= c0.secondsFromPresent - 1
        assert c1.remainingFuelOnBoard <= c0.remainingFuelOnBoard + 100


def test_distance_to_top_of_descent(observer):
    driver = _driver(observer)
    tod = driver.currentNavGeometryProfile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
    assert driver.getDistanceToTopOfDescent() == pytest.approx(tod.distanceFromStart)
    assert driver.version == 1


def test_no_profile_without_mandatory_parameters(observer):
    observer.update(zeroFuelWeight=None)
    driver = _driver(observer)
    assert not driver.currentNavGeometryProfile.isReadyToDisplay
    assert driver.currentNavGeometryProfile.checkpoints == []
    assert driver.getDistanceToTopOfDescent() is None


def test_no_profile_on_short_geometry(observer):
    driver = _driver(observer, straightGeometry(["WPT0"]))
    assert driver.currentNavGeometryProfile.checkpoints == []


def test_climb_levels_off_below_max_altitude_constraint(observer):
    geometry = _constrainedGeometry(1, SEGMENT_TYPE.DEPARTURE,
                                    altitudeConstraint=AltitudeConstraint(ALTITUDE_CONSTRAINT.AT_OR_BELOW, 5000))
    profile = _driver(observer, geometry).currentNavGeometryProfile
    constraintDistance = geometry.distanceToEndOfLeg(1)

    reasons = _reasons(profile)
    assert CHECKPOINT_REASON.LEVEL_OFF_CLIMB_CONSTRAINT in reasons
    assert CHECKPOINT_REASON.CONTINUE_CLIMB in reasons
    assert profile.interpolateAltitudeAtDistance(constraintDistance) <= 5000 + 1
    resume = profile.findVerticalCheckpoint(CHECKPOINT_REASON.CONTINUE_CLIMB)
    assert resume.distanceFromStart == pytest.approx(constraintDistance)


def test_descent_levels_off_at_max_altitude_constraint(observer):
    geometry = _constrainedGeometry(2, SEGMENT_TYPE.ARRIVAL,
                                    altitudeConstraint=AltitudeConstraint(ALTITUDE_CONSTRAINT.AT_OR_BELOW, 10000))
    unconstrained = _driver(observer).currentNavGeometryProfile
    profile = _driver(observer, geometry).currentNavGeometryProfile
    constraintDistance = geometry.distanceToEndOfLeg(2)

    assert CHECKPOINT_REASON.LEVEL_OFF_DESCENT_CONSTRAINT in _reasons(profile)
    assert profile.interpolateAltitudeAtDistance(constraintDistance) <= 10000 + 1
    tod = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
    assert tod.distanceFromStart < unconstrained.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT).distanceFromStart


#
# Cruise steps
#
def test_step_climb_within_cruise(observer):
    driver = VnavDriver(observer)
    step = driver.requestCruiseStep(24000, distanceFromStart=80)
    driver.acceptMultipleLegGeometry(straightGeometry(ROUTE), 0)
    profile = driver.currentNavGeometryProfile

    assert not step.isIgnored
    stepClimb = profile.findVerticalCheckpoint(CHECKPOINT_REASON.STEP_CLIMB)
    topOfStep = profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_STEP_CLIMB)
    assert stepClimb.distanceFromStart == pytest.approx(80)
    assert stepClimb.altitude == pytest.approx(20000)
    assert topOfStep.altitude == pytest.approx(24000)
    assert profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT).altitude == pytest.approx(24000)


def test_step_outside_of_cruise_is_skipped(observer, caplog):
    driver = VnavDriver(observer)
    step = driver.requestCruiseStep(24000, distanceFromStart=5)
    with caplog.at_level(logging.WARNING):
        driver.acceptMultipleLegGeometry(straightGeometry(ROUTE), 0)

    assert "not within cruise segment" in caplog.text
    assert CHECKPOINT_REASON.STEP_CLIMB not in _reasons(driver.currentNavGeometryProfile)
    assert step.isIgnored


def test_step_at_waypoint_follows_geometry(observer):
    driver = _driver(observer)
    step = driver.requestCruiseStep(24000, waypointIndex=2)
    assert step.distanceFromStart == pytest.approx(driver.geometry.distanceToEndOfLeg(2))
    assert driver.requestCruiseStep(24000, waypointIndex=9) is None

    # waypoint 2 no longer exists in the new geometry
    driver.acceptMultipleLegGeometry(straightGeometry(["WPT0", "WPT3"]), 0)
    assert step not in driver.stepCoordinator.steps


#
# Selected modes
#
def test_tactical_descent_to_fcu_altitude(observer):
    observer.update(flightPhase=FLIGHT_PHASE.CRUISE, presentPosition=20000, presentSpeed=290,
                    fcuVerticalMode=VERTICAL_MODE.OP_DES, fcuAltitude=12000)
    driver = _driver(observer)
    nd = driver.currentNdGeometryProfile

    assert CHECKPOINT_REASON.PRESENT_POSITION in _reasons(nd)
    crossing = nd.findVerticalCheckpoint(CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_DESCENT)
    assert crossing is not None
    assert crossing.altitude == pytest.approx(12000)
    # managed profile is unaffected by the selected mode
    assert CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_DESCENT not in _reasons(driver.currentNavGeometryProfile)
    assert driver.currentNavGeometryProfile.checkpoints[0].reason == CHECKPOINT_REASON.PRESENT_POSITION


def test_open_climb_in_selected_lateral_mode(observer):
    observer.update(flightPhase=FLIGHT_PHASE.CLIMB, presentPosition=8000, presentSpeed=250,
                    fcuLateralMode=LATERAL_MODE.HDG, fcuVerticalMode=VERTICAL_MODE.OP_CLB, fcuAltitude=15000)
    nd = _driver(observer).currentNdGeometryProfile

    assert _reasons(nd)[0] == CHECKPOINT_REASON.PRESENT_POSITION
    assert _reasons(nd)[-1] == CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_CLIMB
    assert nd.lastCheckpoint.altitude == pytest.approx(15000)
    assert CHECKPOINT_REASON.TOP_OF_DESCENT not in _reasons(nd)


def test_expedite_climb_profile(observer):
    observer.update(flightPhase=FLIGHT_PHASE.CLIMB, presentPosition=8000, fcuAltitude=15000)
    driver = _driver(observer)
    profile = driver.computeVerticalProfileForExpediteClimb()
    assert profile.lastCheckpoint.reason == CHECKPOINT_REASON.CROSSING_FCU_ALTITUDE_CLIMB
    assert all([c.speed == observer.get().greenDotSpeed for c in profile.checkpoints])

    observer.update(greenDotSpeed=0)
    assert driver.computeVerticalProfileForExpediteClimb() is None


#
# Guidance policy
#
def test_managed_lateral_navigation(observer):
    driver = VnavDriver(observer)
    assert driver.isInManagedNav()
    observer.update(fcuLateralMode=LATERAL_MODE.HDG)
    assert not driver.isInManagedNav()
    observer.update(fcuArmedLateralMode=ARMED_LATERAL_MODE.NAV)
    assert driver.isInManagedNav()


def test_speed_constraints_obeyed_in_managed_speed_only(observer):
    geometry = _constrainedGeometry(1, SEGMENT_TYPE.DEPARTURE,
                                    speedConstraint=SpeedConstraint(SPEED_CONSTRAINT.AT_OR_BELOW, 230))
    driver = _driver(observer, geometry)
    assert driver.shouldObeySpeedConstraints()
    assert driver.getCurrentSpeedConstraint() == 230

    observer.update(fcuSpeed=250)
    assert not driver.shouldObeySpeedConstraints()
    assert driver.getCurrentSpeedConstraint() == math.inf

    observer.update(fcuSpeed=-1, fcuLateralMode=LATERAL_MODE.HDG)
    assert driver.getCurrentSpeedConstraint() == math.inf


def test_altitude_constraints_obeyed(observer):
    driver = VnavDriver(observer)
    observer.update(fcuLateralMode=LATERAL_MODE.HDG, fcuVerticalMode=VERTICAL_MODE.DES)
    assert driver.shouldObeyAltitudeConstraints()
    observer.update(fcuVerticalMode=VERTICAL_MODE.OP_DES)
    assert not driver.shouldObeyAltitudeConstraints()
    observer.update(fcuArmedVerticalMode=ARMED_VERTICAL_MODE.CLB)
    assert driver.shouldObeyAltitudeConstraints()
    observer.update(fcuArmedVerticalMode=ARMED_VERTICAL_MODE.NONE, fcuArmedLateralMode=ARMED_LATERAL_MODE.NAV)
    assert driver.shouldObeyAltitudeConstraints()


#
# Queries
#
def _handBuiltProfile() -> BaseGeometryProfile:
    profile = BaseGeometryProfile()
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.PRESENT_POSITION, 10, 5000, 250, 0, 10000))
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.TOP_OF_CLIMB, 30, 15000, 290, 300, 9500))
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.TOP_OF_DESCENT, 90, 15000, 290, 900, 9000))
    profile.finalizeProfile()
    return profile


def test_interpolation():
    profile = _handBuiltProfile()
    assert profile.interpolateAltitudeAtDistance(20) == pytest.approx(10000)
    assert profile.interpolateAltitudeAtDistance(0) == pytest.approx(5000)
    assert profile.interpolateAltitudeAtDistance(200) == pytest.approx(15000)
    assert profile.interpolateTimeAtDistance(60) == pytest.approx(600)
    assert profile.interpolateFuelAtDistance(60) == pytest.approx(9250)
    assert profile.interpolateDistanceAtAltitude(7500) == pytest.approx(15)
    assert profile.interpolateDistanceAtAltitude(20000) is None


def test_predict_at_time():
    profile = _handBuiltProfile()
    prediction = profile.predictAtTime(150)
    assert prediction.distanceFromStart == pytest.approx(20)
    assert prediction.altitude == pytest.approx(10000)
    assert prediction.speed == pytest.approx(270)
    assert profile.predictAtTime(-1) is None
    assert profile.predictAtTime(901) is None
    assert BaseGeometryProfile().predictAtTime(0) is None


def test_finalize_keeps_order_of_checkpoints_at_same_distance():
    profile = BaseGeometryProfile()
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.TOP_OF_DESCENT, 50, 15000, 290, 500, 9000))
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.TOP_OF_CLIMB, 20, 15000, 290, 200, 9500))
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.STEP_CLIMB, 50, 15000, 290, 500, 9000))
    profile.finalizeProfile()
    assert _reasons(profile) == [CHECKPOINT_REASON.TOP_OF_CLIMB, CHECKPOINT_REASON.TOP_OF_DESCENT, CHECKPOINT_REASON.STEP_CLIMB]
    assert profile.isReadyToDisplay


def test_start_of_cruise():
    profile = _handBuiltProfile()
    assert profile.findStartOfCruise().reason == CHECKPOINT_REASON.TOP_OF_CLIMB
    profile.removeCheckpoints(CHECKPOINT_REASON.TOP_OF_CLIMB)
    assert profile.findStartOfCruise().reason == CHECKPOINT_REASON.PRESENT_POSITION
    assert BaseGeometryProfile().findStartOfCruise() is None


def test_time_markers(observer):
    driver = _driver(observer)
    driver.addTimeMarker(600)
    driver.addTimeMarker(10 ** 6)
    assert driver.timeMarkers[600].secondsFromPresent == 600
    assert driver.timeMarkers[600].distanceFromStart > 0
    assert driver.timeMarkers[10 ** 6] is None
    driver.removeTimeMarker(600)
    assert 600 not in driver.timeMarkers


def test_vertical_deviation_needs_present_position(observer):
    driver = _driver(observer)
    assert driver.getVerticalDeviation() is None


def test_cruise_altitude_change_triggers_recomputation(observer):
    driver = _driver(observer)
    version = driver.version
    driver.update()
    assert driver.version == version

    observer.update(cruiseAltitude=24000)
    driver.update()
    assert driver.version == version + 1
    tod = driver.currentNavGeometryProfile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
    assert tod.altitude == pytest.approx(24000)


def test_cruise_and_descent_converge(observer):
    # selected lateral mode, only the managed profile runs the coordinator
    observer.update(fcuLateralMode=LATERAL_MODE.HDG)
    driver = _driver(observer)
    coordinator = driver.cruiseToDescentCoordinator

    assert 0 < len(coordinator.residuals) <= CONVERGENCE_MAX_ITERATIONS
    fuelError, timeError = coordinator.residuals[-1]
    assert abs(fuelError) <= CONVERGENCE_FUEL_TOLERANCE
    assert abs(timeError) <= CONVERGENCE_TIME_TOLERANCE

    landing = driver.currentNavGeometryProfile.findVerticalCheckpoint(CHECKPOINT_REASON.LANDING)
    assert 0 < landing.remainingFuelOnBoard < 10000 * 2.20462

    # estimates from the previous computation are reused
    driver.computeProfiles()
    assert len(coordinator.residuals) == 1


class _LinearPredictions:
    """
    Decel, descent and cruise predictions in one. Top of descent fuel and time follow the estimates at destination;
    a heavier or later aircraft at destination leaves less fuel and time at the end of cruise.
    """
    def __init__(self, todDistance: float):
        self.todDistance = todDistance
        self.fuelAtDestination = None
        self.timeAtDestination = None

    def computeDecelPath(self, profile, speedProfile, fuelAtDestination, timeAtDestination):
        self.fuelAtDestination = fuelAtDestination
        self.timeAtDestination = timeAtDestination

    def computeManagedDescentPath(self, profile, speedProfile, cruiseAltitude):
        tod = _checkpoint(CHECKPOINT_REASON.TOP_OF_DESCENT, self.todDistance, cruiseAltitude, 290,
                          self.timeAtDestination - 600, self.fuelAtDestination + 1000)
        profile.addCheckpoint(tod)
        return tod

    def getFinalCruiseAltitude(self) -> float:
        return 20000

    def computeCruisePath(self, profile, stepClimbStrategy, stepDescentStrategy):
        return CruisePathBuilderResults(remainingFuelOnBoardAtTopOfDescent=7000 - 0.2 * self.fuelAtDestination,
                                        secondsFromPresentAtTopOfDescent=3000 - 0.2 * self.timeAtDestination)


def _cruiseProfile() -> BaseGeometryProfile:
    profile = BaseGeometryProfile()
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.PRESENT_POSITION, 0, 0, 0, 0, 10000))
    profile.addCheckpoint(_checkpoint(CHECKPOINT_REASON.TOP_OF_CLIMB, 30, 20000, 290, 300, 9500))
    return profile


def test_convergence_residuals_strictly_decrease():
    predictions = _LinearPredictions(todDistance=100)
    coordinator = CruiseToDescentCoordinator(predictions, predictions, predictions)
    profile = _cruiseProfile()

    assert coordinator.buildCruiseAndDescentPath(profile, None, None, None)

    # each iteration divides both errors by five
    residuals = coordinator.residuals
    assert len(residuals) == CONVERGENCE_MAX_ITERATIONS
    for (fuel, time), (nextFuel, nextTime) in zip(residuals, residuals[1:]):
        assert abs(nextFuel) < abs(fuel)
        assert abs(nextTime) < abs(time)
        assert nextFuel == pytest.approx(-0.2 * fuel)
    assert abs(residuals[-1][0]) <= CONVERGENCE_FUEL_TOLERANCE
    assert abs(residuals[-1][1]) > CONVERGENCE_TIME_TOLERANCE
    assert _reasons(profile) == [CHECKPOINT_REASON.PRESENT_POSITION, CHECKPOINT_REASON.TOP_OF_CLIMB,
                                 CHECKPOINT_REASON.TOP_OF_DESCENT]


def test_top_of_descent_before_start_of_cruise():
    predictions = _LinearPredictions(todDistance=20)
    coordinator = CruiseToDescentCoordinator(predictions, predictions, predictions)

    assert not coordinator.buildCruiseAndDescentPath(_cruiseProfile(), None, None, None)
    assert coordinator.residuals == []
    assert coordinator.lastEstimatedFuelAtDestination == DEFAULT_FUEL_AT_DESTINATION
    assert coordinator.lastEstimatedTimeAtDestination == DEFAULT_TIME_AT_DESTINATION


def test_constraint_helpers():
    window = AltitudeConstraint(ALTITUDE_CONSTRAINT.RANGE, 9000, 7000)
    assert window.maxAltitude() == 9000
    assert window.minAltitude() == 7000
    assert window.isMet(8000)
    assert not window.isMet(9500)
    assert window.isMet(9050, tolerance=100)
    assert AltitudeConstraint(ALTITUDE_CONSTRAINT.AT_OR_ABOVE, 5000).maxAltitude() is None

    assert SpeedConstraint(SPEED_CONSTRAINT.AT, 250).maxSpeed() == 250
    assert SpeedConstraint(SPEED_CONSTRAINT.AT_OR_ABOVE, 180).maxSpeed() is None
    assert SpeedConstraint(SPEED_CONSTRAINT.AT_OR_ABOVE, 180).minSpeed() == 180
