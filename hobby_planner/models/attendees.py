from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hobby_planner.database.db import Base

if TYPE_CHECKING:
    from hobby_planner.models.sessions import HobbySession


class Attendee(Base):
    __tablename__ = "attendees"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[int] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    attendance_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    session: Mapped["HobbySession"] = relationship(back_populates="attendees")
