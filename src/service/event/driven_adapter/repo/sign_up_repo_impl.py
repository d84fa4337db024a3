from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import delete as sql_delete, select, update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import (
    AlreadySignedUpError,
    InternalServerError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.event.app.interface.i_sign_up_repo import ISignUpRepo
from src.service.event.domain.sign_up_entity import SignUpEntity, SignUpStatus
from src.service.event.driven_adapter.model.event_model import (
    EventModel,
    EventSlotModel,
    SignUpModel,
)


class SignUpRepoImpl(ISignUpRepo):
    """
    Sign up persistence with capacity bookkeeping

    Seats are taken and returned with conditional UPDATEs (remaining_capacity > 0,
    matching version) in the same transaction as the sign up row, so concurrent
    sign ups can never overfill an event or a slot.
    """

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create_confirmed(self, *, sign_up: SignUpEntity) -> SignUpEntity:
        if sign_up.slot_id is None:
            raise InternalServerError('A confirmed sign up requires a slot')
        async with self.session_factory() as session:
            await self._take_seat(session, event_id=sign_up.event_id, slot_id=sign_up.slot_id)
            model = self._entity_to_model(sign_up)
            session.add(model)
            await self._commit_sign_up(session)
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def create_on_wait_list(self, *, sign_up: SignUpEntity) -> SignUpEntity:
        async with self.session_factory() as session:
            model = self._entity_to_model(sign_up)
            session.add(model)
            await self._commit_sign_up(session)
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def get(self, *, user_id: UUID, event_id: UUID) -> Optional[SignUpEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SignUpModel)
                .where(SignUpModel.user_id == user_id, SignUpModel.event_id == event_id)
                .order_by(SignUpModel.active.desc(), SignUpModel.created_at.desc())
                .limit(1)
            )
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_id(self, *, sign_up_id: UUID) -> Optional[SignUpEntity]:
        async with self.session_factory() as session:
            model = await session.get(SignUpModel, sign_up_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_many(
        self,
        *,
        event_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        status: Optional[SignUpStatus] = None,
    ) -> list[SignUpEntity]:
        async with self.session_factory() as session:
            stmt = select(SignUpModel).order_by(SignUpModel.created_at)
            if event_id is not None:
                stmt = stmt.where(SignUpModel.event_id == event_id)
            if user_id is not None:
                stmt = stmt.where(SignUpModel.user_id == user_id)
            if status is not None:
                stmt = stmt.where(SignUpModel.participation_status == status.value)
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def promote(self, *, sign_up: SignUpEntity, slot_id: UUID) -> SignUpEntity:
        async with self.session_factory() as session:
            result = await session.execute(
                sql_update(SignUpModel)
                .where(
                    SignUpModel.id == sign_up.id,
                    SignUpModel.version == sign_up.version,
                    SignUpModel.participation_status == SignUpStatus.ON_WAITLIST.value,
                )
                .values(
                    participation_status=SignUpStatus.CONFIRMED.value,
                    slot_id=slot_id,
                    version=SignUpModel.version + 1,
                )
                .returning(SignUpModel)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NotFoundError(f'Sign up {sign_up.id} changed while promoting it')
            await self._take_seat(session, event_id=sign_up.event_id, slot_id=slot_id)
            await session.commit()
            return self._model_to_entity(model)

    @Logger.io
    async def deactivate(
        self, *, sign_up: SignUpEntity, new_status: SignUpStatus
    ) -> SignUpEntity:
        async with self.session_factory() as session:
            await session.execute(
                sql_delete(SignUpModel).where(
                    SignUpModel.user_id == sign_up.user_id,
                    SignUpModel.event_id == sign_up.event_id,
                    SignUpModel.active.is_(False),
                )
            )
            result = await session.execute(
                sql_update(SignUpModel)
                .where(SignUpModel.id == sign_up.id, SignUpModel.version == sign_up.version)
                .values(
                    participation_status=new_status.value,
                    active=False,
                    slot_id=None,
                    version=SignUpModel.version + 1,
                )
                .returning(SignUpModel)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NotFoundError(f'Sign up {sign_up.id} changed while updating it')

            if sign_up.participation_status == SignUpStatus.CONFIRMED:
                await self._return_seat(
                    session, event_id=sign_up.event_id, slot_id=sign_up.slot_id
                )
            await session.commit()
            return self._model_to_entity(model)

    @Logger.io
    async def add_order(self, *, sign_up_id: UUID, order_id: UUID) -> SignUpEntity:
        async with self.session_factory() as session:
            result = await session.execute(
                sql_update(SignUpModel)
                .where(SignUpModel.id == sign_up_id)
                .values(order_id=order_id, version=SignUpModel.version + 1)
                .returning(SignUpModel)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NotFoundError(f'Sign up {sign_up_id} not found')
            await session.commit()
            return self._model_to_entity(model)

    @staticmethod
    async def _take_seat(session: AsyncSession, *, event_id: UUID, slot_id: UUID) -> None:
        event_result = await session.execute(
            sql_update(EventModel)
            .where(EventModel.id == event_id, EventModel.remaining_capacity > 0)
            .values(
                remaining_capacity=EventModel.remaining_capacity - 1,
                version=EventModel.version + 1,
            )
            .returning(EventModel.id)
        )
        if event_result.scalar_one_or_none() is None:
            await session.rollback()
            raise NotFoundError(f'Event {event_id} has no remaining capacity')

        slot_result = await session.execute(
            sql_update(EventSlotModel)
            .where(
                EventSlotModel.id == slot_id,
                EventSlotModel.event_id == event_id,
                EventSlotModel.remaining_capacity > 0,
            )
            .values(
                remaining_capacity=EventSlotModel.remaining_capacity - 1,
                version=EventSlotModel.version + 1,
            )
            .returning(EventSlotModel.id)
        )
        if slot_result.scalar_one_or_none() is None:
            await session.rollback()
            raise NotFoundError(f'Slot {slot_id} has no remaining capacity')

    @staticmethod
    async def _return_seat(
        session: AsyncSession, *, event_id: UUID, slot_id: Optional[UUID]
    ) -> None:
        await session.execute(
            sql_update(EventModel)
            .where(EventModel.id == event_id)
            .values(
                remaining_capacity=EventModel.remaining_capacity + 1,
                version=EventModel.version + 1,
            )
        )
        if slot_id is None:
            raise InternalServerError('Sign up is missing slot ID, but has status CONFIRMED')
        await session.execute(
            sql_update(EventSlotModel)
            .where(EventSlotModel.id == slot_id)
            .values(
                remaining_capacity=EventSlotModel.remaining_capacity + 1,
                version=EventSlotModel.version + 1,
            )
        )

    @staticmethod
    async def _commit_sign_up(session: AsyncSession) -> None:
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise AlreadySignedUpError('You are already signed up for this event.') from e

    @staticmethod
    def _entity_to_model(sign_up: SignUpEntity) -> SignUpModel:
        return SignUpModel(
            id=sign_up.id,
            user_id=sign_up.user_id,
            event_id=sign_up.event_id,
            slot_id=sign_up.slot_id,
            participation_status=sign_up.participation_status.value,
            active=sign_up.active,
            user_provided_information=sign_up.user_provided_information,
            order_id=sign_up.order_id,
            version=sign_up.version,
        )

    @staticmethod
    def _model_to_entity(model: SignUpModel) -> SignUpEntity:
        return SignUpEntity(
            id=model.id,
            user_id=model.user_id,
            event_id=model.event_id,
            slot_id=model.slot_id,
            participation_status=SignUpStatus(model.participation_status),
            user_provided_information=model.user_provided_information,
            order_id=model.order_id,
            version=model.version,
            created_at=model.created_at,
        )
