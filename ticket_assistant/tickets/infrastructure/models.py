"""
Tickets Infrastructure Models
=============================

SQLAlchemy ORM models for the tickets module.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticket_assistant.auth.infrastructure.models import UserModel
from ticket_assistant.config import TicketStatus
from ticket_assistant.infrastructure.database import Base


class TicketModel(Base):
    """
    Database model for Ticket entity.

    Maps to the 'tickets' table. Triage columns stay NULL until the
    background triage succeeds.
    """
    __tablename__ = "tickets"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Ticket content
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TicketStatus.TODO.value, index=True
    )

    # Triage output
    priority: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    level: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    related_skills: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    helpful_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Ownership
    created_by_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_to_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    # Many-to-one, eagerly joined; async sessions cannot lazy load
    created_by: Mapped[UserModel] = relationship(
        UserModel, foreign_keys=[created_by_id], lazy="joined"
    )
    assigned_to: Mapped[Optional[UserModel]] = relationship(
        UserModel, foreign_keys=[assigned_to_id], lazy="joined"
    )
