from .leg import FlightPlanLeg, Discontinuity, FlightPlanElement, LegMetadata
from .segments import FlightPlanSegment, OriginSegment, DepartureRunwayTransitionSegment, DepartureSegment
from .segments import DepartureEnrouteTransitionSegment, EnrouteSegment, ArrivalEnrouteTransitionSegment
from .segments import ArrivalSegment, ArrivalRunwayTransitionSegment, ApproachViaSegment, ApproachSegment
from .segments import DestinationSegment, MissedApproachSegment
from .flightplan import FlightPlan, WaypointStats
from .service import FlightPlanService
