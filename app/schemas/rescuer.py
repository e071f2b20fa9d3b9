from pydantic import BaseModel
from typing import Optional

class LoginRequest(BaseModel):
    badge_id: str
    password: str

class LoginOut(BaseModel):
    id: int
    name: str
    callsign: Optional[str] = None
    status: str

class LogoutIn(BaseModel):
    rescuerId: int

class LocationReportIn(BaseModel):
    rescuerId: int
    lat: float
    lon: float

class RescuerOut(BaseModel):
    id: int
    name: str
    badge_id: str
    callsign: Optional[str] = None
    phone: Optional[str] = None
    status: str

class RescuerLocationOut(BaseModel):
    id: int
    name: str
    last_lat: Optional[float] = None
    last_lon: Optional[float] = None
    status: str
    callsign: Optional[str] = None
