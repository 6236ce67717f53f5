import pytest

from ticket_assistant.config import TicketLevel, TicketPriority, UserRole
from ticket_assistant.core import ValidationException
from ticket_assistant.triage.domain import TriagePromptBuilder, parse_triage_response


def test_parses_fenced_json():
    content = """Here you go:
```json
{"priority": "HIGH", "level": "l3", "relatedSkills": ["React", "react", " CSS "],
 "helpfulNotes": "Check the build.", "suggestedAssigneeRole": "Admin"}
```"""

    fields = parse_triage_response(content)

    assert fields["priority"] == TicketPriority.HIGH
    assert fields["level"] == TicketLevel.L3
    assert fields["related_skills"] == ["React", "CSS"]
    assert fields["helpful_notes"] == "Check the build."
    assert fields["suggested_assignee_role"] == UserRole.ADMIN


def test_out_of_range_values_are_normalised():
    fields = parse_triage_response(
        '{"priority": "critical", "level": "L9", "relatedSkills": "Docker, Kubernetes,,", '
        '"helpfulNotes": "", "suggestedAssigneeRole": "wizard"}'
    )

    assert fields["priority"] == TicketPriority.MEDIUM
    assert fields["level"] is None
    assert fields["related_skills"] == ["Docker", "Kubernetes"]
    assert fields["helpful_notes"] is None
    assert fields["suggested_assignee_role"] is None


def test_missing_fields_default():
    fields = parse_triage_response("{}")

    assert fields["priority"] == TicketPriority.MEDIUM
    assert fields["level"] is None
    assert fields["related_skills"] == []
    assert fields["helpful_notes"] is None


def test_structured_notes_become_text():
    fields = parse_triage_response('{"helpfulNotes": ["restart", "check logs"]}')

    assert fields["helpful_notes"] == '["restart", "check logs"]'


@pytest.mark.parametrize("content", ["", "   ", "not json at all", "[1, 2, 3]", '{"relatedSkills": 5}'])
def test_unusable_responses_raise(content):
    with pytest.raises(ValidationException):
        parse_triage_response(content)


def test_prompt_contains_ticket_text():
    messages = TriagePromptBuilder.build_messages("Printer on fire", "Smoke everywhere")

    assert messages[0]["role"] == "system"
    assert "JSON" in messages[0]["content"]
    assert "Printer on fire" in messages[1]["content"]
    assert "Smoke everywhere" in messages[1]["content"]
