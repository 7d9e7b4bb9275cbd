import logging

import redis
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from hobby_planner.core.security import generate_code
from hobby_planner.models.attendees import Attendee
from hobby_planner.models.sessions import HobbySession
from hobby_planner.services.sessions import SessionNotFoundError, get_session

logger = logging.getLogger(__name__)

LOCK_TIMEOUT = 10
LOCK_BLOCKING_TIMEOUT = 5


class AttendeeNotFoundError(Exception):
    pass


class SessionFullError(Exception):
    pass


class SessionBusyError(Exception):
    pass


class AttendeeEmailRequiredError(Exception):
    pass


def list_attendees(db: Session, session_id: int) -> list[Attendee]:
    return list(
        db.scalars(select(Attendee).where(Attendee.session_id == session_id).order_by(Attendee.id))
    )


def join_session(
    db: Session,
    redis_client: redis.Redis,
    *,
    session_id: int,
    first_name: str,
    last_name: str,
    email: str | None,
    email_required: bool = True,
) -> Attendee:
    """
    Register a new attendee for a session.

    A per-session Redis lock serializes joins across workers, and the seat is
    claimed with a conditional update so the stored attendee count can never
    pass max_participants.
    """
    get_session(db, session_id)
    if email_required and not email:
        raise AttendeeEmailRequiredError("Email is required to join a session")

    lock = redis_client.lock(
        f"session_lock:{session_id}", timeout=LOCK_TIMEOUT, blocking_timeout=LOCK_BLOCKING_TIMEOUT
    )
    try:
        acquired = lock.acquire(blocking=True, blocking_timeout=LOCK_BLOCKING_TIMEOUT)
    except redis.exceptions.LockError:
        acquired = False
    if not acquired:
        raise SessionBusyError("Session is busy, please try again.")

    try:
        attendee = _join_in_transaction(
            db, session_id, name=f"{first_name} {last_name}".strip(), email=email or None
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        _release_lock(lock, session_id)

    db.refresh(attendee)
    logger.info("Attendee id=%s joined session id=%s", attendee.id, session_id)
    return attendee


def _release_lock(lock, session_id: int) -> None:
    # The join is already decided here, a lost lock must not undo it
    try:
        lock.release()
    except redis.exceptions.LockError as e:
        logger.warning(f"Lock for session id={session_id} expired before release: {e}")


def _join_in_transaction(db: Session, session_id: int, *, name: str, email: str | None) -> Attendee:
    # Claim a seat and check capacity in one statement
    stmt = (
        update(HobbySession)
        .where(HobbySession.id == session_id)
        .where(HobbySession.reserved_seats < HobbySession.max_participants)
        .values(reserved_seats=HobbySession.reserved_seats + 1)
        .execution_options(synchronize_session=False)
    )
    res = db.execute(stmt)
    if res.rowcount != 1:  # type: ignore
        # The session may have been deleted since the first lookup
        if db.scalar(select(HobbySession.id).where(HobbySession.id == session_id)) is None:
            raise SessionNotFoundError("Session not found")
        logger.info("Rejected join for full session id=%s", session_id)
        raise SessionFullError("Session is full")

    attendee = Attendee(
        session_id=session_id,
        name=name,
        email=email,
        attendance_code=generate_code(),
    )
    db.add(attendee)
    db.flush()  # gets attendee.id
    return attendee


def get_attendee_by_code(db: Session, attendance_code: str) -> Attendee:
    attendee = db.scalar(select(Attendee).where(Attendee.attendance_code == attendance_code))
    if attendee is None:
        raise AttendeeNotFoundError("Attendee not found")
    return attendee


def update_attendee_by_code(
    db: Session, attendance_code: str, *, name: str, email: str | None
) -> Attendee:
    attendee = get_attendee_by_code(db, attendance_code)
    attendee.name = name
    attendee.email = email
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    return attendee


def delete_attendee_by_code(db: Session, attendance_code: str) -> None:
    """Remove an attendee and give their seat back to the session."""
    attendee = get_attendee_by_code(db, attendance_code)
    attendee_id, session_id = attendee.id, attendee.session_id
    try:
        db.delete(attendee)
        db.execute(
            update(HobbySession)
            .where(HobbySession.id == session_id)
            .where(HobbySession.reserved_seats > 0)
            .values(reserved_seats=HobbySession.reserved_seats - 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Attendee id=%s left session id=%s", attendee_id, session_id)
