"""Ticket dispatch and rescuer status bookkeeping.

Every write goes through `DispatchManager`, which holds the request's session.
Assignment is the only operation touching two rows and runs in one transaction;
everything else is a single-row write. Rescuer status is not a guarded state
machine: the last operation to run decides it.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.db.session import atomic
from app.models.rescuer import (
    Rescuer,
    RESCUER_AVAILABLE,
    RESCUER_ON_MISSION,
    RESCUER_RESPONDING,
    RESCUER_OFF_DUTY,
)
from app.models.ticket import Ticket, TICKET_ACTIVE, TICKET_DISPATCHED, TICKET_SOLVED
from app.services.blob_store import BlobNotFound, profile_image_key

logger = logging.getLogger(__name__)


class DispatchError(RuntimeError):
    pass

class NotFoundError(DispatchError):
    pass

class AuthError(DispatchError):
    pass

class StoreError(DispatchError):
    pass


class DispatchManager:
    def __init__(self, db: Session, blobs=None):
        self.db = db
        self.blobs = blobs

    @contextmanager
    def _write(self, failure: str):
        """Scoped transaction; store failures come out as a generic StoreError."""
        try:
            with atomic(self.db):
                yield
        except (SQLAlchemyError, OSError) as e:
            logger.warning("%s: %s", failure, e)
            raise StoreError(failure) from e

    # -------------------------
    # TICKETS
    # -------------------------
    def create_ticket(self, ticket_number: str, service_type: str | None, user_name: str | None,
                      phone: str | None, latitude: float | None, longitude: float | None,
                      incident_details: str | None) -> Ticket:
        ticket = Ticket(
            ticket_number=ticket_number,
            service_type=service_type,
            user_name=user_name,
            phone=phone,
            latitude=latitude,
            longitude=longitude,
            incident_details=incident_details,
            status=TICKET_ACTIVE,
        )
        with self._write("Ticket could not be saved"):
            self.db.add(ticket)
        logger.info("ticket %s opened (%s, id=%s)", ticket_number, service_type, ticket.id)
        return ticket

    def list_open_tickets(self) -> list[Ticket]:
        return (
            self.db.query(Ticket)
            .filter(Ticket.status != TICKET_SOLVED)
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .all()
        )

    def ticket_status(self, ticket_number: str) -> dict:
        t = (
            self.db.query(Ticket)
            .filter(Ticket.ticket_number == ticket_number)
            .order_by(Ticket.id.asc())
            .first()
        )
        if not t:
            raise NotFoundError("Ticket not found")
        return {"status": t.status, "rescuer_name": t.rescuer_name}

    def assign_rescuer(self, ticket_id: int, rescuer_id: int, rescuer_name: str) -> Ticket:
        """Link a rescuer to a ticket: ticket DISPATCHED, rescuer on-mission, both or neither.

        There is no guard on the ticket's current status, so a SOLVED ticket can be
        dispatched again and a DISPATCHED one silently handed to another rescuer.
        """
        with self._write("Update failed"):
            ticket = self.db.get(Ticket, ticket_id)
            if ticket is None:
                raise NotFoundError("Ticket not found")
            rescuer = self.db.get(Rescuer, rescuer_id)
            if rescuer is None:
                raise NotFoundError("Rescuer not found")

            previous = ticket.rescuer_id
            ticket.rescuer_id = rescuer_id
            ticket.rescuer_name = rescuer_name
            ticket.status = TICKET_DISPATCHED
            self.db.flush()

            rescuer.status = RESCUER_ON_MISSION
            self.db.flush()

        if previous is not None and previous != rescuer_id:
            logger.info("ticket %s reassigned from rescuer %s", ticket_id, previous)
        logger.info("ticket %s dispatched to rescuer %s (%s)", ticket_id, rescuer_id, rescuer_name)
        return ticket

    def solve_ticket(self, ticket_id: int) -> Ticket:
        # the assigned rescuer keeps its status; it is freed by logout or a location report
        with self._write("Ticket could not be updated"):
            ticket = self.db.get(Ticket, ticket_id)
            if ticket is None:
                raise NotFoundError("Ticket not found")
            ticket.status = TICKET_SOLVED
        logger.info("ticket %s solved", ticket_id)
        return ticket

    # -------------------------
    # RESCUER STATUS
    # -------------------------
    def report_location(self, rescuer_id: int, lat: float, lon: float) -> str:
        """Store the position and let the database derive responding/available in the same UPDATE."""
        has_mission = (
            select(Ticket.id)
            .where(Ticket.rescuer_id == rescuer_id, Ticket.status == TICKET_DISPATCHED)
            .exists()
        )
        stmt = (
            update(Rescuer)
            .where(Rescuer.id == rescuer_id)
            .values(
                last_lat=lat,
                last_lon=lon,
                status=case((has_mission, RESCUER_RESPONDING), else_=RESCUER_AVAILABLE),
            )
            .execution_options(synchronize_session=False)
        )
        with self._write("Location update failed"):
            res = self.db.execute(stmt)
            if res.rowcount == 0:
                raise NotFoundError("Rescuer not found")
        status = self.db.scalar(select(Rescuer.status).where(Rescuer.id == rescuer_id))
        logger.debug("rescuer %s at (%s, %s) -> %s", rescuer_id, lat, lon, status)
        return status

    def login(self, badge_id: str, password: str) -> Rescuer:
        rescuer = self.db.query(Rescuer).filter(Rescuer.badge_id == badge_id).first()
        # same error for unknown badge and wrong password
        if not rescuer or not verify_password(password, rescuer.password_hash):
            logger.info("login failed for badge %s", badge_id)
            raise AuthError("Invalid credentials")
        with self._write("Login failed"):
            rescuer.status = RESCUER_AVAILABLE
        logger.info("rescuer %s logged in", rescuer.id)
        return rescuer

    def logout(self, rescuer_id: int) -> Rescuer:
        with self._write("Logout failed"):
            rescuer = self.db.get(Rescuer, rescuer_id)
            if rescuer is None:
                raise NotFoundError("Rescuer not found")
            rescuer.status = RESCUER_OFF_DUTY
        logger.info("rescuer %s off duty", rescuer_id)
        return rescuer

    # -------------------------
    # RESCUER ACCOUNTS
    # -------------------------
    def _discard_blob(self, key: str) -> None:
        try:
            self.blobs.delete(key)
        except Exception:
            logger.exception("could not remove image blob %s", key)

    def register_rescuer(self, name: str, badge_id: str, callsign: str | None, phone: str | None,
                         password: str, image: bytes | None = None) -> Rescuer:
        rescuer = Rescuer(
            name=name,
            badge_id=badge_id,
            callsign=callsign,
            phone=phone,
            password_hash=hash_password(password),
            status=RESCUER_AVAILABLE,
        )
        new_key = None
        # duplicate badge ids are not told apart from other store failures
        try:
            with self._write("Badge ID exists or Database Error"):
                self.db.add(rescuer)
                self.db.flush()
                if image:
                    new_key = self.blobs.put(profile_image_key(rescuer.id), image, "image/jpeg")
                    rescuer.profile_image_key = new_key
        except DispatchError:
            if new_key:
                self._discard_blob(new_key)
            raise
        logger.info("rescuer %s registered (badge %s)", rescuer.id, badge_id)
        return rescuer

    def update_rescuer(self, rescuer_id: int, name: str | None = None, badge_id: str | None = None,
                       callsign: str | None = None, phone: str | None = None,
                       image: bytes | None = None) -> Rescuer:
        """Overwrite the given fields; omitted ones, the stored image included, are left alone.

        A new image goes to a fresh blob key. The row only points at it once the commit
        succeeds; the previous blob is removed afterwards, the new one on failure.
        """
        new_key = old_key = None
        try:
            with self._write("Update failed"):
                rescuer = self.db.get(Rescuer, rescuer_id)
                if rescuer is None:
                    raise NotFoundError("Rescuer not found")
                if name is not None:
                    rescuer.name = name
                if badge_id is not None:
                    rescuer.badge_id = badge_id
                if callsign is not None:
                    rescuer.callsign = callsign
                if phone is not None:
                    rescuer.phone = phone
                if image:
                    old_key = rescuer.profile_image_key
                    new_key = self.blobs.put(profile_image_key(rescuer.id), image, "image/jpeg")
                    rescuer.profile_image_key = new_key
        except DispatchError:
            if new_key:
                self._discard_blob(new_key)
            raise
        if old_key and old_key != new_key:
            self._discard_blob(old_key)
        return rescuer

    def delete_rescuer(self, rescuer_id: int) -> None:
        # tickets keep their rescuer_id/rescuer_name; the image blob is left in place
        with self._write("Delete failed"):
            rescuer = self.db.get(Rescuer, rescuer_id)
            if rescuer is None:
                raise NotFoundError("Rescuer not found")
            self.db.delete(rescuer)
        logger.info("rescuer %s deleted", rescuer_id)

    def list_on_duty_rescuers(self) -> list[Rescuer]:
        return (
            self.db.query(Rescuer)
            .filter(Rescuer.status != RESCUER_OFF_DUTY)
            .order_by(Rescuer.id.asc())
            .all()
        )

    def list_rescuer_locations(self) -> list[Rescuer]:
        return (
            self.db.query(Rescuer)
            .filter(Rescuer.last_lat.isnot(None), Rescuer.status != RESCUER_OFF_DUTY)
            .order_by(Rescuer.id.asc())
            .all()
        )

    def rescuer_image(self, rescuer_id: int) -> bytes:
        rescuer = self.db.get(Rescuer, rescuer_id)
        if not rescuer or not rescuer.profile_image_key:
            raise NotFoundError("Image not found")
        try:
            return self.blobs.get(rescuer.profile_image_key)
        except BlobNotFound:
            raise NotFoundError("Image not found")
