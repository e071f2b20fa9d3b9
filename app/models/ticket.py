from sqlalchemy import String, Integer, Float, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

TICKET_ACTIVE = "ACTIVE"
TICKET_DISPATCHED = "DISPATCHED"
TICKET_SOLVED = "SOLVED"


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # caller supplied, not unique; used for status polling and chat
    ticket_number: Mapped[str] = mapped_column(String(64), index=True)

    service_type: Mapped[str | None] = mapped_column(String(60), nullable=True)
    user_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    incident_details: Mapped[str | None] = mapped_column(Text, nullable=True)

    # weak reference: no foreign key, survives rescuer deletion
    rescuer_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    rescuer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=TICKET_ACTIVE, index=True)  # ACTIVE | DISPATCHED | SOLVED

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_number": self.ticket_number,
            "service_type": self.service_type,
            "user_name": self.user_name,
            "phone": self.phone,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "incident_details": self.incident_details,
            "rescuer_id": self.rescuer_id,
            "rescuer_name": self.rescuer_name,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
