from fastapi import APIRouter, Depends

from app.api.deps import get_dispatch, http_error
from app.schemas.ticket import TicketIn, AssignIn, TicketStatusOut
from app.services.dispatch_service import DispatchError, DispatchManager

router = APIRouter(tags=["tickets"])


@router.post("/ticket")
def create_ticket(body: TicketIn, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        t = dispatch.create_ticket(
            ticket_number=body.ticket_number,
            service_type=body.service,
            user_name=body.name,
            phone=body.phone,
            latitude=body.lat,
            longitude=body.lon,
            incident_details=body.details,
        )
    except DispatchError as e:
        raise http_error(e)
    return {"message": "Ticket saved", "id": t.id}


@router.get("/tickets")
def list_tickets(dispatch: DispatchManager = Depends(get_dispatch)):
    """Open (ACTIVE or DISPATCHED) tickets, newest first."""
    return [t.to_dict() for t in dispatch.list_open_tickets()]


@router.get("/ticket/status/{ticket_number}", response_model=TicketStatusOut)
def ticket_status(ticket_number: str, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        return dispatch.ticket_status(ticket_number)
    except DispatchError as e:
        raise http_error(e)


@router.post("/ticket/assign")
def assign_rescuer(body: AssignIn, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        dispatch.assign_rescuer(body.ticketId, body.rescuerId, body.rescuerName)
    except DispatchError as e:
        raise http_error(e)
    return {"success": True, "message": "Unit dispatched!"}


@router.post("/ticket/solve/{ticket_id}")
def solve_ticket(ticket_id: int, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        dispatch.solve_ticket(ticket_id)
    except DispatchError as e:
        raise http_error(e)
    return {"message": "Ticket marked as solved"}
