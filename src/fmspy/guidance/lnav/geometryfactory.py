"""
Builds and incrementally updates the lateral geometry from a flight plan.
"""
from __future__ import annotations
import logging

from fmspy.constants import LEG_TYPE, FORWARD_DEPENDENT_LEGS
from fmspy.exceptions import LegAdjacencyError, UnsupportedLegTypeError
from fmspy.parameters import NUM_COMPUTED_TRANSITIONS_AFTER_ACTIVE, DEBUG_GEOMETRY
from fmspy.flightplan import FlightPlan, FlightPlanLeg, FlightPlanElement
from fmspy.guidance.lnav.legs import Leg, XFLeg, IFLeg, TFLeg, CFLeg, DFLeg, CALeg, CILeg, AFLeg
from fmspy.guidance.lnav.transitions import TransitionPicker
from fmspy.guidance.lnav.geometry import Geometry

logger = logging.getLogger("GeometryFactory")


class GeometryFactory:

    @staticmethod
    def createFromFlightPlan(flightPlan: FlightPlan, doGenerateTransitions: bool = True) -> Geometry:
        geometry = Geometry()
        elements = flightPlan.allLegs

        for i, element in enumerate(elements):
            if element.isDiscontinuity:
                continue
            prevElement = elements[i - 1] if i > 0 else None
            nextElement = elements[i + 1] if i + 1 < len(elements) else None

            leg = GeometryFactory.geometryLegFromFlightPlanLeg(prevElement, element, nextElement)
            geometry.legs[i] = leg

            previousGeometryLeg = geometry.legs.get(i - 1)
            if previousGeometryLeg is not None and doGenerateTransitions:
                transition = TransitionPicker.forLegs(previousGeometryLeg, leg)
                if transition is not None:
                    geometry.transitions[i - 1] = transition

        geometry.version = flightPlan.version
        if DEBUG_GEOMETRY:
            logger.debug(f":createFromFlightPlan: {geometry}\n{geometry.tabulate()}")
        return geometry

    @staticmethod
    def updateFromFlightPlan(current: Geometry, flightPlan: FlightPlan, doGenerateTransitions: bool = True) -> Geometry:
        """
        Rebuilds legs from the leg before the active one onwards.
        Legs and transitions equal to the existing ones are kept, so unchanged primitives keep their identity.
        """
        elements = flightPlan.allLegs
        legCount = len(elements)
        active = flightPlan.activeLegIndex
        start = max(active - 1, 0)

        for i in range(start, legCount):
            oldLeg = current.legs.get(i)

            element = elements[i]
            prevElement = elements[i - 1] if i > 0 else None
            nextElement = elements[i + 1] if i + 1 < legCount else None

            newLeg = None
            if not element.isDiscontinuity:
                newLeg = GeometryFactory.geometryLegFromFlightPlanLeg(prevElement, element, nextElement)

            previousLeg = current.legs.get(i - 1)
            inRange = NUM_COMPUTED_TRANSITIONS_AFTER_ACTIVE == -1 or i - active <= NUM_COMPUTED_TRANSITIONS_AFTER_ACTIVE

            if oldLeg is not None and newLeg is not None and oldLeg == newLeg:
                # keep the existing primitive on the current fix objects, refresh the inbound transition only if it changed
                if isinstance(oldLeg, XFLeg):
                    oldLeg.fix = newLeg.fix
                if isinstance(oldLeg, TFLeg):
                    oldLeg.fromFix = newLeg.fromFix
                if previousLeg is not None and doGenerateTransitions:
                    transition = TransitionPicker.forLegs(previousLeg, oldLeg)
                    if transition != current.transitions.get(i - 1):
                        if transition is not None:
                            current.transitions[i - 1] = transition
                        else:
                            current.transitions.pop(i - 1, None)
                continue

            if newLeg is not None:
                current.legs[i] = newLeg
                if previousLeg is not None and doGenerateTransitions and inRange:
                    transition = TransitionPicker.forLegs(previousLeg, newLeg)
                    if transition is not None:
                        current.transitions[i - 1] = transition
                    else:
                        current.transitions.pop(i - 1, None)
                else:
                    current.transitions.pop(i - 1, None)
            else:
                current.legs.pop(i, None)
                current.transitions.pop(i - 1, None)
                current.transitions.pop(i, None)

        for index in list(current.legs.keys()):
            if index < active - 1 or index >= legCount:
                current.legs.pop(index, None)
                current.transitions.pop(index - 1, None)
        for index in list(current.transitions.keys()):
            if index not in current.legs or index + 1 not in current.legs:
                current.transitions.pop(index, None)

        current.version = flightPlan.version
        if DEBUG_GEOMETRY:
            logger.debug(f":updateFromFlightPlan: {current}\n{current.tabulate()}")
        return current

    @staticmethod
    def geometryLegFromFlightPlanLeg(previousElement: FlightPlanElement | None, flightPlanLeg: FlightPlanLeg,
                                     nextElement: FlightPlanElement | None) -> Leg:
        legType = flightPlanLeg.type

        if previousElement is not None and previousElement.isDiscontinuity and legType != LEG_TYPE.IF:
            raise LegAdjacencyError(flightPlanLeg, "Leg after a discontinuity must be an IF leg")

        previousLeg = previousElement if previousElement is not None and not previousElement.isDiscontinuity else None
        previousFix = previousLeg.terminationFix() if previousLeg is not None else None

        definition = flightPlanLeg.definition
        metadata = flightPlanLeg.metadata()
        segment = flightPlanLeg.segment
        segmentType = segment.segmentType if segment is not None else None

        if legType == LEG_TYPE.AF:
            return AFLeg(definition.fix, definition.recommendedNavaid, definition.rho, definition.theta, definition.course,
                         metadata=metadata, segmentType=segmentType)

        if legType in [LEG_TYPE.CA, LEG_TYPE.FA]:
            altitude = definition.altitudeConstraint.altitude1 if definition.altitudeConstraint is not None else 0
            startFix = definition.fix if legType == LEG_TYPE.FA and definition.fix is not None else previousFix
            return CALeg(definition.course, altitude, previousFix=startFix, metadata=metadata, segmentType=segmentType)

        if legType == LEG_TYPE.CF:
            return CFLeg(definition.fix, definition.course, previousFix=previousFix, metadata=metadata, segmentType=segmentType)

        if legType == LEG_TYPE.CI:
            if nextElement is None or nextElement.isDiscontinuity:
                raise LegAdjacencyError(flightPlanLeg, "Cannot create a CI leg without a next leg")
            if nextElement.type in FORWARD_DEPENDENT_LEGS:
                raise LegAdjacencyError(flightPlanLeg, "Cannot create a CI leg followed by another intercept leg")
            nextLeg = GeometryFactory.geometryLegFromFlightPlanLeg(flightPlanLeg, nextElement, None)
            return CILeg(definition.course, nextLeg, previousFix=previousFix, metadata=metadata, segmentType=segmentType)

        if legType == LEG_TYPE.DF:
            return DFLeg(definition.fix, previousFix=previousFix, metadata=metadata, segmentType=segmentType)

        if legType == LEG_TYPE.IF:
            return IFLeg(definition.fix, metadata=metadata, segmentType=segmentType)

        if legType == LEG_TYPE.TF:
            if previousLeg is None or not previousLeg.isXf():
                raise LegAdjacencyError(flightPlanLeg, "Cannot create a TF leg after a leg not terminating at a fix")
            return TFLeg(previousFix, definition.fix, metadata=metadata, segmentType=segmentType)

        raise UnsupportedLegTypeError(legType)
