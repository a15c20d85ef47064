#
import logging

logger = logging.getLogger("utils")


def interpolate(x: float, x0: float, x1: float, y0: float, y1: float) -> float:
    """
    Linear interpolation of y at x between (x0, y0) and (x1, y1).
    Returns y0 when both abscissas are the same.
    """
    if x1 == x0:
        return y0
    return y0 + (x - x0) * (y1 - y0) / (x1 - x0)


def interpolate_table(x: float, table: list) -> float:
    """
    Interpolates in a list of (x, y) tuples sorted on x.
    Values outside of the table are clamped to the first or last y.
    """
    if len(table) == 0:
        logger.warning(":interpolate_table: empty table")
        return None
    if x <= table[0][0]:
        return table[0][1]
    for i in range(1, len(table)):
        if x <= table[i][0]:
            return interpolate(x, table[i-1][0], table[i][0], table[i-1][1], table[i][1])
    return table[-1][1]
