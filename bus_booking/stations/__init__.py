"""
Station Directory Module

Resolves station codes to stations and lists the stations that schedules
can run between.
"""

from .router import router
from .service import StationService
from .schemas import Station, StationCreate, StationSummary, StationListResult

__all__ = [
    "router",
    "StationService",
    "Station",
    "StationCreate",
    "StationSummary",
    "StationListResult"
]
