from .legs import Leg, IFLeg, TFLeg, CFLeg, DFLeg, CALeg, CILeg, AFLeg
from .transitions import Transition, FixedRadiusTransition, PathCaptureTransition, CourseCaptureTransition, DirectToFixTransition, TransitionPicker
from .geometry import Geometry
from .geometryfactory import GeometryFactory
