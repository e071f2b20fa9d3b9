from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import http_error
from app.db.session import get_db
from app.schemas.chat import ChatSendIn
from app.services.chat_service import send_message, list_messages
from app.services.dispatch_service import DispatchError

router = APIRouter(tags=["chat"])


@router.post("/chat/send")
def chat_send(body: ChatSendIn, db: Session = Depends(get_db)):
    try:
        msg = send_message(db, body.ticket_number, body.sender, body.message)
    except DispatchError as e:
        raise http_error(e)
    return {"success": True, "id": msg.id}


@router.get("/chat/{ticket_number}")
def chat_thread(ticket_number: str, db: Session = Depends(get_db)):
    """Messages for a ticket, oldest first."""
    return [m.to_dict() for m in list_messages(db, ticket_number)]
