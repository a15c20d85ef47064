"""
Conversion utility functions.
Guidance computations are done in aviation units: feet, knots, nautical miles, pounds.
Geodesic computations return kilometers, hence the helpers below.
"""
import math

# Geology constants
R = 6371000  # Approximate average radius of third rock from the sun, in metres

########################################
# Units, etc
#
FT = 12 * 0.0254  # 1 foot = 12 inches, in meters
NAUTICAL_MILE = 1.852  # Nautical mile in kilometers. 6076.118ft=1nm.
TONS_TO_POUNDS = 2204.62

# ISA
ISA_SEA_LEVEL_TEMPERATURE = 288.15  # K
ISA_LAPSE_RATE = 0.0019812  # K/ft
ISA_TROPOPAUSE = 36089  # ft
SPEED_OF_SOUND_SEA_LEVEL = 661.47  # kn


def sign(x):
    return -1 if x < 0 else (0 if abs(x) == 0 else 1)


class convert:
    """
    Unit conversions, namespaced so that call sites read convert.km_to_nm(d).
    """
    @staticmethod
    def km_to_nm(km):
        return km / NAUTICAL_MILE

    @staticmethod
    def nm_to_km(nm):
        return nm * NAUTICAL_MILE

    @staticmethod
    def feet_to_meters(ft):
        return ft * FT

    @staticmethod
    def meters_to_feet(m):
        return m / FT

    @staticmethod
    def feet_to_nm(ft):
        return ft * FT / (NAUTICAL_MILE * 1000)

    @staticmethod
    def nm_to_feet(nm):
        return nm * NAUTICAL_MILE * 1000 / FT

    @staticmethod
    def kn_to_kmh(kn):
        return kn * NAUTICAL_MILE

    @staticmethod
    def kmh_to_kn(kmh):
        return kmh / NAUTICAL_MILE

    @staticmethod
    def kn_to_ms(kn):
        return kn * NAUTICAL_MILE / 3.6

    @staticmethod
    def ms_to_kn(ms):
        return ms * 3.6 / NAUTICAL_MILE

    @staticmethod
    def fpm_to_ms(fpm):
        return fpm * FT / 60

    @staticmethod
    def tons_to_pounds(t):
        return t * TONS_TO_POUNDS


def isaTemperature(altitude: float, isaDeviation: float = 0) -> float:
    """
    Outside air temperature in Kelvin at altitude (ft) for the supplied ISA deviation.
    """
    alt = min(altitude, ISA_TROPOPAUSE)
    return ISA_SEA_LEVEL_TEMPERATURE - ISA_LAPSE_RATE * alt + isaDeviation


def speedOfSound(altitude: float, isaDeviation: float = 0) -> float:
    """
    Local speed of sound in knots.
    """
    return SPEED_OF_SOUND_SEA_LEVEL * math.sqrt(isaTemperature(altitude, isaDeviation) / ISA_SEA_LEVEL_TEMPERATURE)


def machToKn(mach: float, altitude: float, isaDeviation: float = 0) -> float:
    return mach * speedOfSound(altitude, isaDeviation)


def casToTas(cas: float, altitude: float, isaDeviation: float = 0) -> float:
    """
    Rule of thumb conversion, TAS increases by 2% per 1000ft, corrected for temperature.
    """
    tas = cas * (1 + 0.02 * altitude / 1000)
    return tas * math.sqrt(isaTemperature(altitude, isaDeviation) / isaTemperature(altitude))


def tasToCas(tas: float, altitude: float, isaDeviation: float = 0) -> float:
    return tas / casToTas(1, altitude, isaDeviation)


def casToMach(cas: float, altitude: float, isaDeviation: float = 0) -> float:
    return casToTas(cas, altitude, isaDeviation) / speedOfSound(altitude, isaDeviation)


def crossoverAltitude(cas: float, mach: float) -> float:
    """
    Altitude (ft) above which mach becomes the limiting speed for the supplied CAS/Mach pair.
    """
    low = 0
    high = 45000
    while high - low > 10:
        mid = (low + high) / 2
        if casToMach(cas, mid) < mach:
            low = mid
        else:
            high = mid
    return round((low + high) / 2)
