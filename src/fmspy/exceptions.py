"""
Flight management errors.
Structural errors denote a contract violation by the caller or by upstream navigation data,
they are never retried. Profile computation errors only invalidate the rebuild that raised them.
"""


class FmsError(Exception):
    """Base class for all flight management errors"""
    pass


class StructuralError(FmsError):
    """Flight plan or geometry contract violation"""
    pass


class IndexOutOfBoundsError(StructuralError, IndexError):
    """Global leg index outside of the flight plan"""
    def __init__(self, index, count, message="Index out of bounds"):
        self.index = index
        self.count = count
        super().__init__(f"{message}: index={index}, legCount={count}")


class InvalidSegmentError(StructuralError):
    """Segment does not belong to the flight plan"""
    def __init__(self, segment=None, message="Invalid segment"):
        self.segment = segment
        super().__init__(f"{message}: {segment}" if segment is not None else message)


class SegmentContentError(StructuralError):
    """Segment content cannot satisfy the requested operation"""
    def __init__(self, segment, message="Segment legs only contained a discontinuity"):
        self.segment = segment
        super().__init__(f"{message} [{segment}]")


class NotALegError(StructuralError):
    """A leg was required but the element is a discontinuity"""
    def __init__(self, index, message="Element is a discontinuity"):
        self.index = index
        super().__init__(f"{message} at index {index}")


class LegAdjacencyError(StructuralError):
    """Leg cannot be built with its neighbours"""
    def __init__(self, leg, message="Invalid leg sequence"):
        self.leg = leg
        super().__init__(f"{message}: {leg}")


class UnsupportedLegTypeError(FmsError):
    """No geometry primitive for this leg type"""
    def __init__(self, legType):
        self.legType = legType
        name = getattr(legType, "value", legType)
        super().__init__(f"Could not generate geometry leg for type={name}")


class UnknownProcedureError(FmsError):
    """Airport, runway, procedure or transition identifier not available"""
    def __init__(self, kind, ident):
        self.kind = kind
        self.ident = ident
        super().__init__(f"Unknown {kind}: {ident}")


class ProfileComputationError(FmsError):
    """Vertical profile could not be built from current inputs"""
    pass


class PerformanceDataError(FmsError):
    """Aircraft performance data missing or invalid"""
    def __init__(self, actype, name=None):
        self.actype = actype
        self.name = name
        super().__init__(f"No performance value {name} for {actype}" if name is not None else f"No performance data for {actype}")
