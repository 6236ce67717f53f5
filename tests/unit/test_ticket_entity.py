import pytest

from ticket_assistant.auth.domain import User
from ticket_assistant.config import TicketStatus, UserRole
from ticket_assistant.core import ValidationException
from ticket_assistant.tickets.domain import Ticket, parse_status

CREATOR = User(id="1", email="creator@x.io", role=UserRole.USER)
ASSIGNEE = User(id="2", email="assignee@x.io", role=UserRole.USER)
STRANGER = User(id="3", email="stranger@x.io", role=UserRole.USER)
MODERATOR = User(id="4", email="mod@x.io", role=UserRole.MODERATOR)


def make_ticket(**kwargs):
    defaults = dict(
        id="t1", title="Broken", description="It broke",
        status=TicketStatus.TODO, created_by=CREATOR, assigned_to=ASSIGNEE
    )
    defaults.update(kwargs)
    return Ticket(**defaults)


def test_status_changes_limited_to_assignee_and_staff():
    ticket = make_ticket()

    assert ticket.can_update_status(ASSIGNEE)
    assert ticket.can_update_status(MODERATOR)
    assert not ticket.can_update_status(CREATOR)
    assert not ticket.can_update_status(STRANGER)


def test_visibility():
    ticket = make_ticket()

    assert ticket.can_view(CREATOR)
    assert ticket.can_view(ASSIGNEE)
    assert ticket.can_view(MODERATOR)
    assert not ticket.can_view(STRANGER)


def test_unassigned_ticket():
    ticket = make_ticket(assigned_to=None)

    assert not ticket.is_assigned_to(ASSIGNEE)
    assert ticket.priority is None and ticket.level is None
    assert ticket.related_skills == []
    assert not hasattr(Ticket, "is_triaged")


def test_parse_status():
    assert parse_status("IN_PROGRESS") == TicketStatus.IN_PROGRESS
    with pytest.raises(ValidationException):
        parse_status("in_progress")
    with pytest.raises(ValidationException):
        parse_status("CLOSED")
