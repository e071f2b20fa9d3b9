from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from app.api.deps import get_dispatch, http_error
from app.schemas.rescuer import (
    LoginRequest,
    LoginOut,
    LogoutIn,
    LocationReportIn,
    RescuerOut,
    RescuerLocationOut,
)
from app.services.dispatch_service import DispatchError, DispatchManager

router = APIRouter(tags=["rescuers"])


def _read_upload(upload: Optional[UploadFile]) -> bytes | None:
    if upload is None:
        return None
    data = upload.file.read()
    return data or None


@router.post("/rescuers")
def register_rescuer(
    name: str = Form(...),
    badge_id: str = Form(...),
    password: str = Form(...),
    callsign: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    profile_image: Optional[UploadFile] = File(None),
    dispatch: DispatchManager = Depends(get_dispatch),
):
    """Create a rescuer account. Multipart form; `profile_image` is optional."""
    try:
        r = dispatch.register_rescuer(name, badge_id, callsign, phone, password, image=_read_upload(profile_image))
    except DispatchError as e:
        raise http_error(e)
    return {"message": "Account created successfully", "id": r.id}


@router.get("/rescuers", response_model=list[RescuerOut])
def list_rescuers(dispatch: DispatchManager = Depends(get_dispatch)):
    """Rescuers not off duty."""
    return [
        RescuerOut(id=r.id, name=r.name, badge_id=r.badge_id, callsign=r.callsign, phone=r.phone, status=r.status)
        for r in dispatch.list_on_duty_rescuers()
    ]


@router.get("/rescuers/locations", response_model=list[RescuerLocationOut])
def list_rescuer_locations(dispatch: DispatchManager = Depends(get_dispatch)):
    return [
        RescuerLocationOut(id=r.id, name=r.name, last_lat=r.last_lat, last_lon=r.last_lon, status=r.status, callsign=r.callsign)
        for r in dispatch.list_rescuer_locations()
    ]


@router.get("/rescuers/image/{rescuer_id}")
def rescuer_image(rescuer_id: int, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        data = dispatch.rescuer_image(rescuer_id)
    except DispatchError as e:
        raise http_error(e)
    return Response(content=data, media_type="image/jpeg")


@router.put("/rescuers/{rescuer_id}")
def update_rescuer(
    rescuer_id: int,
    name: Optional[str] = Form(None),
    badge_id: Optional[str] = Form(None),
    callsign: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    profile_image: Optional[UploadFile] = File(None),
    dispatch: DispatchManager = Depends(get_dispatch),
):
    try:
        dispatch.update_rescuer(
            rescuer_id,
            name=name,
            badge_id=badge_id,
            callsign=callsign,
            phone=phone,
            image=_read_upload(profile_image),
        )
    except DispatchError as e:
        raise http_error(e)
    return {"message": "Updated successfully"}


@router.delete("/rescuers/{rescuer_id}")
def delete_rescuer(rescuer_id: int, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        dispatch.delete_rescuer(rescuer_id)
    except DispatchError as e:
        raise http_error(e)
    return {"message": "Rescuer deleted successfully"}


@router.post("/rescuer/login", response_model=LoginOut)
def login(body: LoginRequest, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        r = dispatch.login(body.badge_id, body.password)
    except DispatchError as e:
        raise http_error(e)
    return LoginOut(id=r.id, name=r.name, callsign=r.callsign, status=r.status)


@router.post("/rescuer/logout")
def logout(body: LogoutIn, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        r = dispatch.logout(body.rescuerId)
    except DispatchError as e:
        raise http_error(e)
    return {"success": True, "status": r.status}


@router.post("/rescuer/location")
def report_location(body: LocationReportIn, dispatch: DispatchManager = Depends(get_dispatch)):
    try:
        status = dispatch.report_location(body.rescuerId, body.lat, body.lon)
    except DispatchError as e:
        raise http_error(e)
    return {"success": True, "status": status}
