from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.tickets import Ticket


class TicketsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, ticket_id: int) -> Ticket | None:
        return await session.get(Ticket, ticket_id)

    @staticmethod
    async def create(session: AsyncSession, *, ticket: Ticket) -> Ticket:
        session.add(ticket)
        await session.flush()
        return ticket

    @staticmethod
    async def list_by_user(
        session: AsyncSession,
        *,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.user_id == user_id)
            .order_by(Ticket.purchase_date.desc(), Ticket.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

