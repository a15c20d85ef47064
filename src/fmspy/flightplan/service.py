"""
Flight plans per context: active, temporary (pending revision) and alternate.
"""
from __future__ import annotations
import logging

from fmspy.airspace import NavigationDatabase
from .flightplan import FlightPlan

logger = logging.getLogger("FlightPlanService")


class FlightPlanService:
    """
    Owns the flight plans of each context. A temporary plan is a copy of the active plan
    on which revisions are made before being inserted or discarded.
    """
    def __init__(self, navdb: NavigationDatabase = None):
        self.navdb = navdb
        self.active = FlightPlan(navdb=navdb)
        self.temporary = None
        self.alternate = FlightPlan(navdb=navdb)

    def hasTemporary(self) -> bool:
        return self.temporary is not None

    @property
    def current(self) -> FlightPlan:
        """
        Plan being edited, the temporary plan if one exists.
        """
        return self.temporary if self.temporary is not None else self.active

    def temporaryCreate(self) -> FlightPlan:
        if self.temporary is not None:
            logger.warning(":temporaryCreate: temporary flight plan already exists, reusing it")
            return self.temporary
        self.temporary = self.active.clone()
        return self.temporary

    def temporaryInsert(self):
        if self.temporary is None:
            logger.warning(":temporaryInsert: no temporary flight plan")
            return (False, "FlightPlanService::temporaryInsert: no temporary flight plan")
        version = self.active.version
        self.active = self.temporary
        self.active.version = max(self.active.version, version) + 1
        self.temporary = None
        return (True, "FlightPlanService::temporaryInsert: inserted")

    def temporaryDelete(self):
        if self.temporary is None:
            logger.warning(":temporaryDelete: no temporary flight plan")
            return (False, "FlightPlanService::temporaryDelete: no temporary flight plan")
        self.temporary = None
        return (True, "FlightPlanService::temporaryDelete: deleted")

    def reset(self):
        self.active = FlightPlan(navdb=self.navdb)
        self.temporary = None
        self.alternate = FlightPlan(navdb=self.navdb)
