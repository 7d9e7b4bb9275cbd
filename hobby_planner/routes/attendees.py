from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hobby_planner.database.db import get_db
from hobby_planner.schemas.attendees import AttendeeDetailOut, AttendeeUpdate, MessageOut
from hobby_planner.services.attendees import (
    AttendeeNotFoundError,
    delete_attendee_by_code,
    get_attendee_by_code,
    update_attendee_by_code,
)

router = APIRouter(prefix="/attendees", tags=["attendees"])


@router.get("/{attendance_code}", response_model=AttendeeDetailOut)
def attendee_detail(attendance_code: str, db: Session = Depends(get_db)):
    try:
        return get_attendee_by_code(db, attendance_code)
    except AttendeeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{attendance_code}", response_model=MessageOut)
def edit_attendee(attendance_code: str, payload: AttendeeUpdate, db: Session = Depends(get_db)):
    try:
        update_attendee_by_code(db, attendance_code, name=payload.name, email=payload.email)
    except AttendeeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Attendee info updated successfully"}


@router.delete("/{attendance_code}", response_model=MessageOut)
def leave_session(attendance_code: str, db: Session = Depends(get_db)):
    try:
        delete_attendee_by_code(db, attendance_code)
    except AttendeeNotFoundError:
        raise HTTPException(status_code=404, detail="Invalid attendance code")
    return {"message": "You have left the session"}
