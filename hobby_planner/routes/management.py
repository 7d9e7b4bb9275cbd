from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hobby_planner.database.db import get_db
from hobby_planner.schemas.attendees import ManagedAttendeeOut, MessageOut
from hobby_planner.schemas.sessions import ManagedSessionOut, SessionUpdate
from hobby_planner.services.sessions import (
    SessionNotFoundError,
    delete_session,
    get_session_by_code,
    list_attendees_by_code,
    update_session,
)

# Every route here is authorized solely by knowing the management code
router = APIRouter(prefix="/sessions/manage", tags=["management"])


@router.get("/{management_code}", response_model=ManagedSessionOut)
def managed_session(management_code: str, db: Session = Depends(get_db)):
    try:
        return get_session_by_code(db, management_code)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{management_code}/attendees", response_model=list[ManagedAttendeeOut])
def managed_attendees(management_code: str, db: Session = Depends(get_db)):
    try:
        return list_attendees_by_code(db, management_code)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{management_code}", response_model=ManagedSessionOut)
def edit_session(management_code: str, payload: SessionUpdate, db: Session = Depends(get_db)):
    try:
        return update_session(db, management_code, payload)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{management_code}", response_model=MessageOut)
def remove_session(management_code: str, db: Session = Depends(get_db)):
    try:
        delete_session(db, management_code)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Session deleted successfully"}
