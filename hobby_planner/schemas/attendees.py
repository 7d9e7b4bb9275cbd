from datetime import datetime

from hobby_planner.schemas.sessions import CamelModel


class AttendeeJoin(CamelModel):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None


class AttendeeUpdate(CamelModel):
    name: str
    email: str | None = None


class AttendeeOut(CamelModel):
    id: int
    session_id: int
    name: str
    registered_at: datetime | None = None


class ManagedAttendeeOut(AttendeeOut):
    email: str | None = None


class AttendeeDetailOut(CamelModel):
    name: str
    email: str | None = None
    session_id: int


class JoinOut(CamelModel):
    message: str
    attendance_code: str


class MessageOut(CamelModel):
    message: str
