from .checkpoint import VerticalCheckpoint, TimePrediction
from .computationparameters import VerticalProfileComputationParameters, VerticalProfileComputationParametersObserver
from .predictions import Predictions, StepResults, AtmosphericConditions
from .strategies import ClimbStrategy, DescentStrategy, ClimbThrustClimbStrategy, VerticalSpeedStrategy, IdleDescentStrategy
from .constraintreader import ConstraintReader, MaxAltitudeConstraint, MaxSpeedConstraint, DescentAltitudeConstraint
from .speedprofile import SpeedProfile, McduSpeedProfile, NdSpeedProfile, ExpediteSpeedProfile
from .profile import BaseGeometryProfile, NavGeometryProfile, SelectedGeometryProfile
from .stepcoordinator import StepCoordinator, GeographicCruiseStep
from .takeoff import TakeoffPathBuilder
from .climb import ClimbPathBuilder
from .cruise import CruisePathBuilder, CruisePathBuilderResults
from .descent import DescentPathBuilder, DecelPathBuilder, TacticalDescentPathBuilder
from .cruisetodescent import CruiseToDescentCoordinator
from .vnavdriver import VnavDriver
