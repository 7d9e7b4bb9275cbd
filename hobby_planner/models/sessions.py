from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text, func, select
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from hobby_planner.database.db import Base
from hobby_planner.models.attendees import Attendee


class HobbySession(Base):
    __tablename__ = "sessions"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(Text, nullable=False)
    time: Mapped[str] = mapped_column(Text, nullable=False)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    management_code: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Only touched by the conditional join/leave updates
    reserved_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    current_participants: Mapped[int] = column_property(
        select(func.count(Attendee.id))
        .where(Attendee.session_id == id)
        .correlate_except(Attendee)
        .scalar_subquery()
    )

    attendees: Mapped[list["Attendee"]] = relationship(
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
