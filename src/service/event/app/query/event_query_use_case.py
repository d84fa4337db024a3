from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.event.domain.event_entity import EventCategoryEntity, EventEntity, SlotEntity


class EventQueryUseCase:
    def __init__(self, *, event_repo: IEventRepo) -> None:
        self.event_repo = event_repo

    @Logger.io
    async def get(self, *, event_id: UUID) -> EventEntity:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        return event

    @Logger.io
    async def find_many(
        self,
        *,
        only_future_events: bool = False,
        organization_id: Optional[UUID] = None,
        category_ids: Optional[list[UUID]] = None,
    ) -> list[EventEntity]:
        end_at_gte = datetime.now(timezone.utc) if only_future_events else None
        return await self.event_repo.find_many(
            end_at_gte=end_at_gte, organization_id=organization_id, category_ids=category_ids
        )

    @Logger.io
    async def find_many_categories(
        self, *, event_id: Optional[UUID] = None
    ) -> list[EventCategoryEntity]:
        return await self.event_repo.find_many_categories(event_id=event_id)

    @Logger.io
    async def find_many_slots(self, *, event_id: UUID) -> list[SlotEntity]:
        return await self.event_repo.find_many_slots(event_id=event_id)
