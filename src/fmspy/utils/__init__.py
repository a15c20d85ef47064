from .unitconversion import convert, sign, FT, NAUTICAL_MILE, TONS_TO_POUNDS
from .unitconversion import machToKn, casToTas, tasToCas, casToMach, crossoverAltitude, speedOfSound
from .interpolate import interpolate, interpolate_table
