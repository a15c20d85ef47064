"""
Guidance controller: keeps the lateral geometry and the vertical profiles in step with the active flight plan.
"""
import logging

from fmspy.exceptions import ProfileComputationError
from fmspy.parameters import DEBUG_GEOMETRY
from fmspy.flightplan import FlightPlanService
from fmspy.guidance.lnav import Geometry, GeometryFactory
from fmspy.guidance.vnav import VerticalProfileComputationParametersObserver, VnavDriver

logger = logging.getLogger("GuidanceController")


class GuidanceController:
    """
    Geometry is rebuilt when the active flight plan version or active leg changes.
    A new geometry and its profiles replace the previous ones only when both were built.
    Structural errors are raised to the caller, profile computation errors are logged;
    in both cases the previous geometry and profiles stay active and the rebuild is retried on the next update.
    """
    def __init__(self, flightPlanService: FlightPlanService, observer: VerticalProfileComputationParametersObserver):
        self.flightPlanService = flightPlanService
        self.observer = observer
        self.activeGeometry = None
        self.vnavDriver = VnavDriver(observer, flightPlanService)
        self.lastVersion = None
        self.lastActiveLegIndex = None

    @property
    def activeLegIndex(self) -> int:
        return self.flightPlanService.active.activeLegIndex

    def update(self, deltaTime: float = 0):
        flightPlan = self.flightPlanService.active
        if flightPlan.version == self.lastVersion and flightPlan.activeLegIndex == self.lastActiveLegIndex:
            return self.updateProfile(deltaTime)

        if self.activeGeometry is None:
            geometry = GeometryFactory.createFromFlightPlan(flightPlan)
        else:
            geometry = GeometryFactory.updateFromFlightPlan(self.activeGeometry.copy(), flightPlan)

        if DEBUG_GEOMETRY:
            logger.debug(f":update: new geometry for flight plan v{flightPlan.version}\n{geometry.tabulate()}")

        ret = self.acceptGeometry(geometry, flightPlan.activeLegIndex)
        if not ret[0]:
            return ret

        self.activeGeometry = geometry
        self.lastVersion = flightPlan.version
        self.lastActiveLegIndex = flightPlan.activeLegIndex
        return ret

    def acceptGeometry(self, geometry: Geometry, activeLegIndex: int):
        try:
            self.vnavDriver.acceptMultipleLegGeometry(geometry, activeLegIndex)
        except ProfileComputationError as e:
            logger.warning(f":acceptGeometry: vertical profile not computed, previous geometry and profile kept: {e}")
            return (False, f"GuidanceController::acceptGeometry: vertical profile not computed: {e}")
        return (True, "GuidanceController::acceptGeometry: geometry and profile updated")

    def updateProfile(self, deltaTime: float = 0):
        try:
            self.vnavDriver.update(deltaTime)
        except ProfileComputationError as e:
            logger.warning(f":updateProfile: vertical profile not computed, previous profile kept: {e}")
            return (False, f"GuidanceController::updateProfile: vertical profile not computed: {e}")
        return (True, "GuidanceController::updateProfile: updated")
