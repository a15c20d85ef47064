import pytest

from fmspy.constants import CHECKPOINT_REASON
from fmspy.exceptions import ProfileComputationError, LegAdjacencyError
from fmspy.flightplan import Discontinuity
from fmspy.guidance import GuidanceController


@pytest.fixture
def controller(enrouteFlightPlanService, observer) -> GuidanceController:
    return GuidanceController(enrouteFlightPlanService, observer)


def test_first_update_builds_geometry_and_profile(controller, enrouteFlightPlanService):
    ok, _ = controller.update()
    assert ok
    assert controller.activeGeometry is not None
    assert controller.lastVersion == enrouteFlightPlanService.active.version
    assert sorted(controller.activeGeometry.legs.keys()) == [0, 2, 3, 4, 5, 7]

    profile = controller.vnavDriver.currentNavGeometryProfile
    assert profile.isReadyToDisplay
    assert profile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT) is not None
    assert profile.waypointCount == enrouteFlightPlanService.active.legCount


def test_unchanged_plan_only_updates_profile(controller):
    controller.update()
    geometry = controller.activeGeometry
    version = controller.vnavDriver.version

    ok, message = controller.update()
    assert ok
    assert "updateProfile" in message
    assert controller.activeGeometry is geometry
    assert controller.vnavDriver.version == version


def test_flight_plan_change_updates_geometry(controller, enrouteFlightPlanService):
    controller.update()
    previous = controller.activeGeometry
    fp = enrouteFlightPlanService.active

    fp.removeElementAt(fp.globalIndexOf(fp.enrouteSegment, 2))
    ok, _ = controller.update()

    assert ok
    assert controller.activeGeometry is not previous
    assert controller.activeGeometry.version == fp.version
    assert controller.activeGeometry.legs[3] is previous.legs[3]
    assert controller.activeGeometry.legs[4].ident == "WPT3"


def test_structural_error_keeps_previous_geometry(controller, enrouteFlightPlanService):
    controller.update()
    geometry = controller.activeGeometry
    legs = dict(geometry.legs)
    fp = enrouteFlightPlanService.active

    # gap between WPT0 and the track to WPT1
    fp.enrouteSegment.allLegs.insert(1, Discontinuity())
    fp.incrementVersion()

    with pytest.raises(LegAdjacencyError):
        controller.update()
    assert controller.activeGeometry is geometry
    assert geometry.legs == legs


def _failOnce(monkeypatch, coordinator):
    """Makes the next cruise and descent build fail, later builds run normally."""
    build = coordinator.buildCruiseAndDescentPath
    failures = []

    def buildOrFail(*args, **kwargs):
        if len(failures) == 0:
            failures.append(True)
            raise ProfileComputationError("Could not coordinate cruise and descent path")
        return build(*args, **kwargs)

    monkeypatch.setattr(coordinator, "buildCruiseAndDescentPath", buildOrFail)
    return failures


def test_previous_geometry_and_profile_kept_on_computation_error(controller, enrouteFlightPlanService, monkeypatch):
    controller.update()
    driver = controller.vnavDriver
    geometry = controller.activeGeometry
    profile = driver.currentNavGeometryProfile
    version = controller.lastVersion
    fp = enrouteFlightPlanService.active

    _failOnce(monkeypatch, driver.cruiseToDescentCoordinator)
    fp.removeElementAt(fp.globalIndexOf(fp.enrouteSegment, 2))
    ok, message = controller.update()

    assert not ok
    assert "Could not coordinate" in message
    assert controller.activeGeometry is geometry
    assert controller.lastVersion == version
    assert driver.geometry is geometry
    assert driver.currentNavGeometryProfile is profile
    assert profile.isReadyToDisplay

    # the flight plan change is applied on the next update
    ok, _ = controller.update()
    assert ok
    assert controller.lastVersion == fp.version
    assert controller.activeGeometry.legs[4].ident == "WPT3"
    assert driver.geometry is controller.activeGeometry
    assert driver.currentNavGeometryProfile is not profile


def test_cruise_altitude_change_retried_after_computation_error(controller, observer, monkeypatch):
    controller.update()
    driver = controller.vnavDriver
    profile = driver.currentNavGeometryProfile
    version = driver.version

    _failOnce(monkeypatch, driver.cruiseToDescentCoordinator)
    observer.update(cruiseAltitude=24000)
    ok, _ = controller.update()

    assert not ok
    assert driver.currentNavGeometryProfile is profile
    assert driver.lastCruiseAltitude == 20000
    assert driver.version == version

    ok, _ = controller.update()
    assert ok
    assert driver.version == version + 1
    tod = driver.currentNavGeometryProfile.findVerticalCheckpoint(CHECKPOINT_REASON.TOP_OF_DESCENT)
    assert tod.altitude == pytest.approx(24000)


def test_step_locations_restored_after_computation_error(controller, enrouteFlightPlanService, monkeypatch):
    controller.update()
    driver = controller.vnavDriver
    step = driver.requestCruiseStep(22000, waypointIndex=4)
    distance = step.distanceFromStart
    fp = enrouteFlightPlanService.active

    _failOnce(monkeypatch, driver.cruiseToDescentCoordinator)
    # WPT2 leaves the plan, WPT3 becomes element 4
    fp.removeElementAt(4)
    ok, _ = controller.update()

    assert not ok
    assert step in driver.stepCoordinator.steps
    assert step.distanceFromStart == pytest.approx(distance)

    ok, _ = controller.update()
    assert ok
    assert step in driver.stepCoordinator.steps
    assert step.distanceFromStart == pytest.approx(controller.activeGeometry.distanceToEndOfLeg(4))
    assert step.distanceFromStart > distance + 50
