from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class StationBase(BaseModel):
    station_code: str = Field(..., min_length=1, max_length=20)
    name: str

class StationCreate(StationBase):
    pass

class Station(StationBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StationSummary(BaseModel):
    """Compact station reference embedded in schedule responses"""
    id: int
    station_code: str
    name: str

    class Config:
        from_attributes = True

class StationListResult(BaseModel):
    stations: List[Station]
    total: int
    page: int
    per_page: int
