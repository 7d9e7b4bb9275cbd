import logging

import redis
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hobby_planner.core.config import Settings, get_settings
from hobby_planner.core.redis_config import get_redis_client
from hobby_planner.database.db import get_db
from hobby_planner.schemas.attendees import AttendeeJoin, AttendeeOut, JoinOut
from hobby_planner.schemas.sessions import (
    ManagedSessionOut,
    SessionCreate,
    SessionCreatedOut,
    SessionOut,
)
from hobby_planner.services.attendees import (
    AttendeeEmailRequiredError,
    SessionBusyError,
    SessionFullError,
    join_session,
    list_attendees,
)
from hobby_planner.services.notifications import Mailer, get_mailer
from hobby_planner.services.sessions import (
    SessionNotFoundError,
    create_session,
    get_session,
    list_sessions,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=list[SessionOut])
def all_sessions(db: Session = Depends(get_db)):
    return list_sessions(db)


@router.get("/{session_id}", response_model=SessionOut)
def session_detail(session_id: int, db: Session = Depends(get_db)):
    try:
        return get_session(db, session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=SessionCreatedOut, status_code=201)
def new_session(
    payload: SessionCreate,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    try:
        hobby_session = create_session(db, payload)
    except SQLAlchemyError:
        logger.exception("Error creating session title=%r", payload.title)
        raise HTTPException(status_code=500, detail="Failed to create session")

    out = ManagedSessionOut.model_validate(hobby_session)
    message = "Session created successfully."
    if out.email:
        # The session is already stored, a mail failure only changes the message
        if mailer.send_management_link(
            out.email, title=out.title, management_code=out.management_code
        ):
            message += " Management link sent by email."
        else:
            message += " But email failed to send."
    return SessionCreatedOut(**out.model_dump(), message=message)


@router.get("/{session_id}/attendees", response_model=list[AttendeeOut])
def session_attendees(session_id: int, db: Session = Depends(get_db)):
    return list_attendees(db, session_id)


@router.post("/{session_id}/attendees", response_model=JoinOut, status_code=201)
def join(
    session_id: int,
    payload: AttendeeJoin,
    db: Session = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis_client),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    try:
        attendee = join_session(
            db,
            redis_client,
            session_id=session_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            email_required=settings.ATTENDEE_EMAIL_REQUIRED,
        )
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (SessionFullError, AttendeeEmailRequiredError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionBusyError as e:
        raise HTTPException(status_code=503, detail=str(e))

    message = "You are now attending the session!"
    if attendee.email:
        sent = mailer.send_attendance_link(
            attendee.email,
            name=attendee.name,
            title=attendee.session.title,
            attendance_code=attendee.attendance_code,
        )
        message += " Email sent successfully." if sent else " But email failed to send."

    return JoinOut(message=message, attendance_code=attendee.attendance_code)
