"""
Tickets Infrastructure Repositories
===================================

SQLAlchemy implementation of the ticket repository.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.infrastructure.repositories import parse_uuid
from ticket_assistant.auth.infrastructure.repositories import to_domain as user_to_domain
from ticket_assistant.config import TicketLevel, TicketPriority, TicketStatus
from ticket_assistant.core import RepositoryException, ResourceNotFoundException
from ticket_assistant.tickets.application import ITicketRepository
from ticket_assistant.tickets.domain import Pagination, Ticket
from ticket_assistant.tickets.infrastructure.models import TicketModel
from ticket_assistant.triage.domain import TriageResult

GROUPABLE_FIELDS = {
    "status": TicketModel.status,
    "priority": TicketModel.priority,
    "level": TicketModel.level,
}


def to_domain(model: TicketModel) -> Ticket:
    """Map a TicketModel row (with joined users) to the domain entity."""
    return Ticket(
        id=str(model.id),
        title=model.title,
        description=model.description,
        status=TicketStatus(model.status),
        created_by=user_to_domain(model.created_by) if model.created_by else None,
        assigned_to=user_to_domain(model.assigned_to) if model.assigned_to else None,
        priority=TicketPriority(model.priority) if model.priority else None,
        level=TicketLevel(model.level) if model.level else None,
        related_skills=list(model.related_skills or []),
        helpful_notes=model.helpful_notes,
        created_at=model.created_at,
        updated_at=model.updated_at
    )


class SQLAlchemyTicketRepository(ITicketRepository):
    """SQLAlchemy implementation for tickets."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, ticket_id: str) -> Optional[TicketModel]:
        ticket_uuid = parse_uuid(ticket_id)
        if ticket_uuid is None:
            return None

        # populate_existing refreshes rows changed by bulk UPDATEs in this session
        stmt = (
            select(TicketModel)
            .where(TicketModel.id == ticket_uuid)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def create(self, title: str, description: str, created_by_id: str) -> Ticket:
        now = datetime.now(timezone.utc)
        model = TicketModel(
            id=uuid4(),
            title=title,
            description=description,
            status=TicketStatus.TODO.value,
            related_skills=[],
            created_by_id=parse_uuid(created_by_id),
            created_at=now,
            updated_at=now
        )

        self._session.add(model)
        try:
            await self._session.flush()
        except Exception as e:
            raise RepositoryException(f"Failed to create ticket: {e}")

        created = await self._get_model(str(model.id))
        return to_domain(created)

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        model = await self._get_model(ticket_id)
        return to_domain(model) if model else None

    async def list_page(
        self,
        pagination: Pagination,
        assigned_to_id: Optional[str] = None
    ) -> Tuple[List[Ticket], int]:
        count_stmt = select(func.count(TicketModel.id))
        stmt = select(TicketModel)

        if assigned_to_id is not None:
            condition = TicketModel.assigned_to_id == parse_uuid(assigned_to_id)
            count_stmt = count_stmt.where(condition)
            stmt = stmt.where(condition)

        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            stmt.order_by(TicketModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        result = await self._session.execute(stmt)
        return [to_domain(model) for model in result.unique().scalars().all()], total

    async def update_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        ticket_uuid = parse_uuid(ticket_id)
        if ticket_uuid is None:
            raise ResourceNotFoundException("Ticket", ticket_id)

        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_uuid)
            .values(status=status.value, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise ResourceNotFoundException("Ticket", ticket_id)

        return to_domain(await self._get_model(ticket_id))

    async def apply_triage(
        self,
        ticket_id: str,
        triage: TriageResult,
        assigned_to_id: Optional[str]
    ) -> Optional[Ticket]:
        ticket_uuid = parse_uuid(ticket_id)
        if ticket_uuid is None:
            return None

        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_uuid)
            .values(
                priority=triage.priority.value,
                level=triage.level.value if triage.level else None,
                related_skills=list(triage.related_skills),
                helpful_notes=triage.helpful_notes,
                assigned_to_id=parse_uuid(assigned_to_id) if assigned_to_id else None,
                updated_at=datetime.now(timezone.utc)
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        model = await self._get_model(ticket_id)
        return to_domain(model) if model else None

    async def count_created_since(self, since: Optional[datetime] = None) -> int:
        stmt = select(func.count(TicketModel.id))
        if since is not None:
            stmt = stmt.where(TicketModel.created_at >= since)
        return (await self._session.execute(stmt)).scalar_one()

    async def count_by_field(self, field_name: str) -> Dict[Optional[str], int]:
        column = GROUPABLE_FIELDS.get(field_name)
        if column is None:
            raise RepositoryException(f"Cannot group tickets by '{field_name}'")

        stmt = select(column, func.count(TicketModel.id)).group_by(column)
        result = await self._session.execute(stmt)
        return {value: count for value, count in result.all()}

    async def assignment_counts(self) -> Dict[str, Dict[str, int]]:
        stmt = (
            select(TicketModel.assigned_to_id, TicketModel.status, func.count(TicketModel.id))
            .where(TicketModel.assigned_to_id.is_not(None))
            .group_by(TicketModel.assigned_to_id, TicketModel.status)
        )
        result = await self._session.execute(stmt)

        counts: Dict[str, Dict[str, int]] = {}
        for user_id, status, count in result.all():
            counts.setdefault(str(user_id), {})[status] = count
        return counts

    async def list_recent(self, limit: int) -> List[Ticket]:
        stmt = select(TicketModel).order_by(TicketModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [to_domain(model) for model in result.unique().scalars().all()]
