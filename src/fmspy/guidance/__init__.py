from .guidancecontroller import GuidanceController
