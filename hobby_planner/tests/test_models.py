"""
Test database models (HobbySession and Attendee).
"""
import pytest
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hobby_planner.models.attendees import Attendee
from hobby_planner.models.sessions import HobbySession


class TestHobbySessionModel:
    """Test the HobbySession model."""

    def test_create_session(self, db_session: Session, make_session):
        """Test creating a session."""
        hobby_session = make_session(title="Pottery", max_participants=8)

        assert hobby_session.id is not None
        assert hobby_session.title == "Pottery"
        assert hobby_session.max_participants == 8
        assert hobby_session.reserved_seats == 0
        assert hobby_session.created_at is not None
        assert hobby_session.latitude is None
        assert hobby_session.longitude is None

    def test_ids_are_never_reused(self, db_session: Session, make_session):
        """Deleting the newest session must not free its id for the next one."""
        first = make_session(management_code="first")
        second = make_session(management_code="second")
        second_id = second.id

        db_session.delete(second)
        db_session.commit()

        third = make_session(management_code="third")
        assert third.id > second_id > first.id

    def test_management_code_is_unique(self, db_session: Session, make_session):
        make_session(management_code="same")
        with pytest.raises(IntegrityError):
            make_session(management_code="same")
        db_session.rollback()

    def test_current_participants_counts_attendees(self, db_session: Session, make_session, make_attendee):
        """Test the live attendee count mapped on the session."""
        hobby_session = make_session()
        assert hobby_session.current_participants == 0

        make_attendee(hobby_session, code="a1")
        make_attendee(hobby_session, code="a2")

        db_session.refresh(hobby_session)
        assert hobby_session.current_participants == 2
        assert len(hobby_session.attendees) == 2


class TestAttendeeModel:
    """Test the Attendee model."""

    def test_create_attendee(self, db_session: Session, make_session):
        hobby_session = make_session()
        attendee = Attendee(
            session_id=hobby_session.id,
            name="Grace Hopper",
            email="grace@example.com",
            attendance_code="code-1",
        )
        db_session.add(attendee)
        db_session.commit()
        db_session.refresh(attendee)

        assert attendee.id is not None
        assert attendee.registered_at is not None
        assert attendee.session.title == hobby_session.title

    def test_attendee_requires_existing_session(self, db_session: Session):
        attendee = Attendee(session_id=424242, name="Nobody", email=None, attendance_code="ghost")
        db_session.add(attendee)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_store_cascades_session_delete(self, db_session: Session, make_session, make_attendee):
        """A raw delete of the session row removes its attendees too."""
        hobby_session = make_session()
        make_attendee(hobby_session, code="c1")
        make_attendee(hobby_session, code="c2")
        session_id = hobby_session.id

        db_session.execute(delete(HobbySession).where(HobbySession.id == session_id))
        db_session.commit()

        remaining = db_session.scalars(select(Attendee).where(Attendee.session_id == session_id)).all()
        assert remaining == []
