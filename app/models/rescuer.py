from sqlalchemy import String, Integer, Float
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base

RESCUER_AVAILABLE = "available"
RESCUER_ON_MISSION = "on-mission"
RESCUER_RESPONDING = "responding"
RESCUER_OFF_DUTY = "off-duty"


class Rescuer(Base):
    __tablename__ = "rescuers"
    # ids are never reused; tickets keep dangling rescuer_id values after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    badge_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    callsign: Mapped[str | None] = mapped_column(String(60), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    profile_image_key: Mapped[str | None] = mapped_column(String(512), nullable=True)  # blob store key
    # available, on-mission, responding, off-duty; whichever write lands last wins
    status: Mapped[str] = mapped_column(String(20), default=RESCUER_AVAILABLE, index=True)
    last_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_lon: Mapped[float | None] = mapped_column(Float, nullable=True)
