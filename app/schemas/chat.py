from pydantic import BaseModel

class ChatSendIn(BaseModel):
    ticket_number: str
    sender: str = ""
    message: str
