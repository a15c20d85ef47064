from .fix import Fix
from .constraint import AltitudeConstraint, SpeedConstraint
from .procedure import ProcedureLeg, ProcedureTransition, Procedure, SID, STAR, APPCH
from .airport import Airport, Runway
from .navdb import NavigationDatabase, StaticNavigationDatabase
