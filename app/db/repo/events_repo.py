from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.events import Event


class EventsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, event_id: int) -> Event | None:
        return await session.get(Event, event_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, event_id: int) -> Event | None:
        stmt = select(Event).where(Event.id == event_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, event: Event) -> Event:
        session.add(event)
        await session.flush()
        return event
