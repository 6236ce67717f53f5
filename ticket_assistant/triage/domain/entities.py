"""
Triage Domain Entities
======================

Triage result entity, prompt construction and response normalisation.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

from ticket_assistant.auth.domain import normalize_skills
from ticket_assistant.config import (
    VALID_LEVELS,
    VALID_PRIORITIES,
    VALID_ROLES,
    TicketLevel,
    TicketPriority,
    UserRole,
)
from ticket_assistant.core import ValidationException


@dataclass
class TriageResult:
    """
    Structured suggestion returned by the triage collaborator.

    level is None when the provider gave nothing usable; priority
    falls back to medium instead.
    """
    priority: TicketPriority
    level: Optional[TicketLevel]
    related_skills: List[str]
    helpful_notes: Optional[str]
    suggested_assignee_role: Optional[UserRole] = None
    model_used: str = "unknown"
    latency_ms: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "priority": self.priority.value,
            "level": self.level.value if self.level else None,
            "relatedSkills": list(self.related_skills),
            "helpfulNotes": self.helpful_notes,
            "suggestedAssigneeRole": (
                self.suggested_assignee_role.value if self.suggested_assignee_role else None
            ),
        }


class TriagePromptBuilder:
    """
    Builds prompts for ticket triage.

    All prompt text lives here.
    """

    SYSTEM_PROMPT = """You are an expert AI assistant that triages technical support tickets.

Your job is to:
1. Summarize the issue for the person who will work on it.
2. Estimate its priority.
3. Estimate the support level required.
4. Identify the technical skills needed to resolve it.
5. Provide helpful notes: likely causes, first debugging steps and useful references.

PRIORITY:
- high: outage, data loss, security issue, many users blocked
- medium: feature broken with a workaround, single user blocked
- low: question, cosmetic issue, nice-to-have

LEVEL:
- L1: routine support, configuration or how-to questions
- L2: debugging needed in one component
- L3: deep, cross-system or architectural problems

SUGGESTED ASSIGNEE ROLE: "moderator" for routine work, "admin" for escalations.

Respond ONLY with a single JSON object, no markdown, no commentary:
{
    "priority": "low" | "medium" | "high",
    "level": "L1" | "L2" | "L3",
    "relatedSkills": ["Skill", ...],
    "helpfulNotes": "detailed technical notes",
    "suggestedAssigneeRole": "moderator" | "admin"
}"""

    @classmethod
    def build_prompt(cls, title: str, description: str) -> str:
        """Build triage prompt from ticket content."""
        return f"""Analyze the following support ticket.

Title: {title}

Description:
{description}

Triage this ticket (respond with JSON only):"""

    @classmethod
    def get_system_prompt(cls) -> str:
        return cls.SYSTEM_PROMPT

    @classmethod
    def build_messages(cls, title: str, description: str) -> List[dict]:
        return [
            {"role": "system", "content": cls.get_system_prompt()},
            {"role": "user", "content": cls.build_prompt(title, description)},
        ]


def _extract_json_text(content: str) -> str:
    """Strip markdown fences and any prose around the JSON object."""
    text = content.strip()
    if "```json" in text:
        text = text.split("```json", 1)[1].split("```", 1)[0]
    elif "```" in text:
        text = text.split("```", 1)[1].split("```", 1)[0]

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        text = text[start:end + 1]
    return text.strip()


def _coerce_skills(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return normalize_skills(value.split(","))
    if isinstance(value, list):
        return normalize_skills(item for item in value if isinstance(item, str))
    raise ValidationException("relatedSkills must be a list of strings")


def parse_triage_response(content: str) -> dict:
    """
    Normalise a provider answer into triage fields.

    - priority outside low/medium/high becomes medium
    - level outside L1..L3 becomes None
    - relatedSkills becomes a de-duplicated list (comma strings accepted)
    - helpfulNotes becomes a string or None

    Raises:
        ValidationException: Not a JSON object or relatedSkills unusable
    """
    if not content or not content.strip():
        raise ValidationException("Empty triage response")

    try:
        data = json.loads(_extract_json_text(content))
    except json.JSONDecodeError as e:
        raise ValidationException(f"Triage response is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ValidationException("Triage response must be a JSON object")

    priority = str(data.get("priority") or "").strip().lower()
    if priority not in VALID_PRIORITIES:
        priority = TicketPriority.MEDIUM.value

    level = str(data.get("level") or "").strip().upper()
    role = str(data.get("suggestedAssigneeRole") or "").strip().lower()

    notes = data.get("helpfulNotes")
    if notes is not None and not isinstance(notes, str):
        notes = json.dumps(notes)

    return {
        "priority": TicketPriority(priority),
        "level": TicketLevel(level) if level in VALID_LEVELS else None,
        "related_skills": _coerce_skills(data.get("relatedSkills")),
        "helpful_notes": (notes.strip() or None) if notes else None,
        "suggested_assignee_role": UserRole(role) if role in VALID_ROLES else None,
    }
