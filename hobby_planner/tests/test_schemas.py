"""
Test request coercion and the public/management views.
"""
from hobby_planner.schemas.sessions import (
    ManagedSessionOut,
    SessionCreate,
    SessionOut,
    coerce_capacity,
)


class TestCapacityCoercion:
    def test_numbers_and_numeric_strings(self):
        assert coerce_capacity(4) == 4
        assert coerce_capacity("12") == 12
        assert coerce_capacity(3.9) == 3

    def test_garbage_becomes_zero(self):
        assert coerce_capacity(None) == 0
        assert coerce_capacity("lots") == 0
        assert coerce_capacity(float("nan")) == 0
        assert coerce_capacity([]) == 0

    def test_negative_becomes_zero(self):
        assert coerce_capacity(-5) == 0

    def test_missing_capacity_defaults_to_zero(self):
        payload = SessionCreate(
            title="Knitting",
            description="",
            date="2026-11-02",
            time="10:00",
            type="crafts",
            managementCode="k",
        )
        assert payload.max_participants == 0


class TestSessionViews:
    def test_public_view_hides_secrets(self, make_session):
        hobby_session = make_session(management_code="top-secret", email="owner@example.com")

        data = SessionOut.model_validate(hobby_session).model_dump(by_alias=True)

        assert data["maxParticipants"] == hobby_session.max_participants
        assert "managementCode" not in data
        assert "email" not in data
        assert data["currentParticipants"] == 0

    def test_management_view_exposes_code(self, make_session):
        hobby_session = make_session(management_code="top-secret", email="owner@example.com")

        data = ManagedSessionOut.model_validate(hobby_session).model_dump(by_alias=True)

        assert data["managementCode"] == "top-secret"
        assert data["email"] == "owner@example.com"
