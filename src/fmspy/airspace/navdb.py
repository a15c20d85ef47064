"""
Navigation database interface.
The guidance core never parses navigation data, it asks a NavigationDatabase for resolved airports.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from fmspy.airspace.airport import Airport
from fmspy.airspace.fix import Fix

logger = logging.getLogger("NavigationDatabase")


class NavigationDatabase(ABC):

    @abstractmethod
    def getAirport(self, ident: str) -> Airport | None:
        pass

    @abstractmethod
    def getFix(self, ident: str) -> Fix | None:
        pass


class StaticNavigationDatabase(NavigationDatabase):
    """
    In memory navigation database loaded with already resolved airports and fixes.
    """
    def __init__(self, airports: List[Airport] = None, fixes: List[Fix] = None):
        self.airports: Dict[str, Airport] = {}
        self.fixes: Dict[str, Fix] = {}
        for a in airports if airports is not None else []:
            self.addAirport(a)
        for f in fixes if fixes is not None else []:
            self.addFix(f)

    def addAirport(self, airport: Airport):
        self.airports[airport.ident] = airport

    def addFix(self, fix: Fix):
        self.fixes[fix.ident] = fix

    def getAirport(self, ident: str) -> Airport | None:
        a = self.airports.get(ident)
        if a is None:
            logger.warning(f":getAirport: airport {ident} not found")
        return a

    def getFix(self, ident: str) -> Fix | None:
        f = self.fixes.get(ident)
        if f is None:
            logger.warning(f":getFix: fix {ident} not found")
        return f
