from pydantic import BaseModel
from typing import Optional

class TicketIn(BaseModel):
    ticket_number: str
    service: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    details: Optional[str] = None

class AssignIn(BaseModel):
    ticketId: int
    rescuerId: int
    rescuerName: str = ""

class TicketStatusOut(BaseModel):
    status: str
    rescuer_name: Optional[str] = None
