"""
Aircraft performance data used by vertical profile predictions.
"""
from __future__ import annotations
import logging

import yaml

from importlib_resources import files

from fmspy.parameters import DEFAULT_AIRCRAFT
from fmspy.exceptions import PerformanceDataError
from fmspy.utils import interpolate_table

logger = logging.getLogger("AircraftPerformance")


class ACPERF:
    """
    List of aircraft performances. (Enum-like.)
    Speeds are in knots CAS, vertical speeds in ft/min, fuel flows in lbs/h, weights in lbs.
    """
    icao = "icao"
    name = "name"
    takeoff_speed = "takeoff_speed"
    takeoff_distance = "takeoff_distance"
    initial_climb_speed = "initial_climb_speed"
    initial_climb_vspeed = "initial_climb_vspeed"
    climbFL150_speed = "climbFL150_speed"
    climbFL150_vspeed = "climbFL150_vspeed"
    climbFL240_speed = "climbFL240_speed"
    climbFL240_vspeed = "climbFL240_vspeed"
    climbmach_mach = "climbmach_mach"
    climbmach_vspeed = "climbmach_vspeed"
    cruise_speed = "cruise_speed"
    cruise_mach = "cruise_mach"
    max_ceiling = "max_ceiling"
    descentFL240_mach = "descentFL240_mach"
    descentFL240_vspeed = "descentFL240_vspeed"
    descentFL100_speed = "descentFL100_speed"
    descentFL100_vspeed = "descentFL100_vspeed"
    approach_speed = "approach_speed"
    approach_vspeed = "approach_vspeed"
    landing_speed = "landing_speed"
    green_dot_speed = "green_dot_speed"
    slats_speed = "slats_speed"
    flaps_speed = "flaps_speed"
    reference_weight = "reference_weight"
    fuel_flow_takeoff = "fuel_flow_takeoff"
    fuel_flow_climb = "fuel_flow_climb"
    fuel_flow_cruise = "fuel_flow_cruise"
    fuel_flow_idle = "fuel_flow_idle"
    fuel_flow_approach = "fuel_flow_approach"


class AircraftPerformance:
    """
    Performance data of an aircraft type, loaded from the packaged YAML files.
    {
        "icao": "A320",
        "takeoff_speed": 145,
        "initial_climb_speed": 175,
        "initial_climb_vspeed": 2500,
        "climbFL150_speed": 290,
        "climbFL150_vspeed": 2000,
        ...
        "fuel_flow_cruise": 5200
    }
    """
    _DB_PERF = {}

    def __init__(self, typeId: str, data: dict):
        self.typeId = typeId
        self.perfraw = data

    @staticmethod
    def find(typeId: str = DEFAULT_AIRCRAFT) -> AircraftPerformance:
        """
        Returns the performance data of the aircraft type, loading it on first use.
        """
        key = typeId.upper()
        if key not in AircraftPerformance._DB_PERF:
            AircraftPerformance._DB_PERF[key] = AircraftPerformance.load(key)
        return AircraftPerformance._DB_PERF[key]

    @staticmethod
    def load(typeId: str) -> AircraftPerformance:
        filename = f"{typeId.upper()}.yaml"
        resource = files("fmspy.data.aircraft_types").joinpath(filename)
        if not resource.is_file():
            logger.warning(f":load: no performance data file {filename}")
            raise PerformanceDataError(typeId)
        data = yaml.safe_load(resource.read_text())
        logger.debug(f":load: loaded {filename} for aircraft type {typeId}")
        return AircraftPerformance(typeId, data)

    def get(self, name: str):
        """
        Get performance raw value

        :param      name:  The name
        :type       name:  str
        """
        if name in self.perfraw.keys():
            return self.perfraw[name]
        else:
            logger.warning(f":get: no value for: {name}")
        return None

    def require(self, name: str):
        """
        Get performance raw value, raises PerformanceDataError if absent.
        """
        v = self.perfraw.get(name)
        if v is None or v == "no data":
            raise PerformanceDataError(self.typeId, name)
        return v

    def weightRatio(self, grossWeight: float) -> float:
        ref = self.get(ACPERF.reference_weight)
        if ref is None or grossWeight is None or grossWeight <= 0:
            return 1
        return grossWeight / ref

    #
    # Climb helper functions
    #
    def climbVerticalSpeed(self, altitude: float, grossWeight: float = None) -> float:
        """
        Climb rate at full climb thrust, lower when heavier.
        """
        table = [(0, self.require(ACPERF.initial_climb_vspeed)),
                 (15000, self.require(ACPERF.climbFL150_vspeed)),
                 (24000, self.require(ACPERF.climbFL240_vspeed)),
                 (self.require(ACPERF.max_ceiling) * 100, self.require(ACPERF.climbmach_vspeed))]
        return interpolate_table(altitude, table) / self.weightRatio(grossWeight)

    #
    # Descent helper functions
    #
    def descentVerticalSpeed(self, altitude: float) -> float:
        """
        Idle descent rate, returned as a positive value.
        """
        if altitude > 24000:
            return self.require(ACPERF.descentFL240_vspeed)
        if altitude > 10000:
            return self.require(ACPERF.descentFL100_vspeed)
        return self.require(ACPERF.approach_vspeed)

    #
    # Fuel
    #
    def fuelFlow(self, name: str, grossWeight: float = None) -> float:
        """
        Fuel flow in lbs/h for the supplied ACPERF fuel flow name, proportional to gross weight.
        """
        return self.require(name) * self.weightRatio(grossWeight)

    def __repr__(self):
        return f"AircraftPerformance({self.typeId})"
