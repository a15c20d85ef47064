from .performance import ACPERF, AircraftPerformance
