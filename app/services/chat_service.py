import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.db.session import atomic
from app.models.message import Message
from app.services.dispatch_service import StoreError

logger = logging.getLogger(__name__)

def send_message(db: Session, ticket_number: str, sender: str, message: str) -> Message:
    """Append a chat line to a ticket's thread. The ticket number is not checked against tickets."""
    msg = Message(ticket_number=ticket_number, sender=sender or "", message=message or "")
    try:
        with atomic(db):
            db.add(msg)
    except SQLAlchemyError as e:
        logger.warning("chat message for %s not saved: %s", ticket_number, e)
        raise StoreError("Message could not be saved") from e
    return msg

def list_messages(db: Session, ticket_number: str) -> list[Message]:
    # id breaks ties between sends landing in the same clock tick
    return (
        db.query(Message)
        .filter(Message.ticket_number == ticket_number)
        .order_by(Message.timestamp.asc(), Message.id.asc())
        .all()
    )
