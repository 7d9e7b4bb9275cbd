import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from hobby_planner.models.attendees import Attendee
from hobby_planner.models.sessions import HobbySession
from hobby_planner.schemas.sessions import SessionCreate, SessionUpdate

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    pass


def list_sessions(db: Session) -> list[HobbySession]:
    """All sessions, newest first, each carrying its live participant count."""
    return list(db.scalars(select(HobbySession).order_by(HobbySession.id.desc())))


def get_session(db: Session, session_id: int) -> HobbySession:
    hobby_session = db.get(HobbySession, session_id)
    if hobby_session is None:
        raise SessionNotFoundError("Session not found")
    return hobby_session


def get_session_by_code(db: Session, management_code: str) -> HobbySession:
    hobby_session = db.scalar(
        select(HobbySession).where(HobbySession.management_code == management_code)
    )
    if hobby_session is None:
        raise SessionNotFoundError("Session not found")
    return hobby_session


def create_session(db: Session, payload: SessionCreate) -> HobbySession:
    hobby_session = HobbySession(
        title=payload.title,
        description=payload.description,
        date=payload.date,
        time=payload.time,
        max_participants=payload.max_participants,
        type=payload.type,
        management_code=payload.management_code,
        latitude=payload.latitude,
        longitude=payload.longitude,
        email=payload.email or None,
        reserved_seats=0,
    )
    db.add(hobby_session)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(hobby_session)
    logger.info("Created session id=%s title=%r", hobby_session.id, hobby_session.title)
    return hobby_session


def update_session(db: Session, management_code: str, payload: SessionUpdate) -> HobbySession:
    """Overwrite every mutable field of the session owning ``management_code``."""
    hobby_session = get_session_by_code(db, management_code)

    hobby_session.title = payload.title
    hobby_session.description = payload.description
    hobby_session.date = payload.date
    hobby_session.time = payload.time
    hobby_session.max_participants = payload.max_participants
    hobby_session.type = payload.type
    hobby_session.latitude = payload.latitude
    hobby_session.longitude = payload.longitude
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(hobby_session)
    return hobby_session


def delete_session(db: Session, management_code: str) -> None:
    """
    Delete a session and every attendee registered to it.

    Attendees are removed explicitly before the session, in the same
    transaction, so nothing is orphaned even on a store without FK cascades.
    """
    hobby_session = get_session_by_code(db, management_code)
    session_id = hobby_session.id
    try:
        db.execute(delete(Attendee).where(Attendee.session_id == session_id))
        db.execute(delete(HobbySession).where(HobbySession.id == session_id))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted session id=%s and its attendees", session_id)


def list_attendees_by_code(db: Session, management_code: str) -> list[Attendee]:
    hobby_session = get_session_by_code(db, management_code)
    return list(
        db.scalars(
            select(Attendee).where(Attendee.session_id == hobby_session.id).order_by(Attendee.id)
        )
    )
