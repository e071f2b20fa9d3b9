from functools import lru_cache

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.services.blob_store import build_blob_store
from app.services.dispatch_service import AuthError, DispatchError, DispatchManager, NotFoundError


@lru_cache(maxsize=1)
def _blob_store():
    return build_blob_store()


def get_blob_store():
    return _blob_store()


def get_dispatch(db: Session = Depends(get_db), blobs=Depends(get_blob_store)) -> DispatchManager:
    return DispatchManager(db, blobs)


def http_error(e: DispatchError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, AuthError):
        return HTTPException(status_code=401, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
