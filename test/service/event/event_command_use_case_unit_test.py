"""
Unit tests for EventCommandUseCase

Test Focus:
1. Only organization members create and edit events
2. TICKETS events get a product on creation
3. Capacity growth asks the worker to promote from the wait list
4. Slots with sign ups cannot be deleted
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.message_queue.job_name import JobName
from src.service.event.app.command.event_command_use_case import (
    EventCommandUseCase,
    NewEventData,
    NewSlotData,
    SlotChanges,
    TicketInformation,
)
from src.service.event.domain.event_entity import (
    EventEntity,
    EventType,
    EventUpdate,
    SignUpDetails,
    SlotEntity,
)


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def start_at() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=30)


@pytest.fixture
def mock_event_repo() -> AsyncMock:
    repo = AsyncMock()

    async def create(*, event, slots):
        event.slots = slots
        return event

    async def update(*, event, slots_to_create, slots_to_update, slots_to_delete, category_ids):
        return event

    repo.create.side_effect = create
    repo.update.side_effect = update
    return repo


@pytest.fixture
def mock_permission_service() -> AsyncMock:
    service = AsyncMock()
    service.has_role.return_value = True
    service.is_super_user.return_value = False
    return service


@pytest.fixture
def mock_product_use_case() -> AsyncMock:
    use_case = AsyncMock()
    use_case.create_ticket_product.return_value = MagicMock(id=uuid4())
    return use_case


@pytest.fixture
def mock_job_queue() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def use_case(
    mock_event_repo, mock_permission_service, mock_product_use_case, mock_job_queue
) -> EventCommandUseCase:
    return EventCommandUseCase(
        event_repo=mock_event_repo,
        permission_service=mock_permission_service,
        product_use_case=mock_product_use_case,
        job_queue=mock_job_queue,
    )


def _sign_up_details(start_at: datetime, capacity: int = 10) -> SignUpDetails:
    return SignUpDetails(
        signups_start_at=start_at - timedelta(days=20),
        signups_end_at=start_at - timedelta(days=1),
        capacity=capacity,
        signups_enabled=True,
    )


def _existing_event(organization_id, start_at: datetime, slot: SlotEntity) -> EventEntity:
    details = _sign_up_details(start_at)
    return EventEntity(
        type=EventType.SIGN_UPS,
        name='Fadderuke',
        start_at=start_at,
        end_at=start_at + timedelta(hours=2),
        organization_id=organization_id,
        signups_enabled=True,
        signups_start_at=details.signups_start_at,
        signups_end_at=details.signups_end_at,
        capacity=10,
        remaining_capacity=0,
        slots=[slot],
    )


@pytest.mark.unit
class TestCreateEvent:
    @pytest.mark.asyncio
    async def test_create_sign_up_event_with_slots(
        self, use_case: EventCommandUseCase, organization_id, start_at
    ):
        """
        Given: a member of the organization
        When: they create a SIGN_UPS event with two slots
        Then: the event is stored with full remaining capacity and both slots
        """
        # Act
        event = await use_case.create(
            user_id=uuid4(),
            type=EventType.SIGN_UPS,
            data=NewEventData(name='Fadderuke', start_at=start_at, organization_id=organization_id),
            signup_details=_sign_up_details(start_at),
            slots=[NewSlotData(capacity=6, grade_years=[1]), NewSlotData(capacity=4)],
        )

        # Assert
        assert event.remaining_capacity == 10
        assert [slot.capacity for slot in event.slots] == [6, 4]
        assert event.slots[1].grade_years == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_create_ticket_event__creates_product(
        self, use_case: EventCommandUseCase, organization_id, start_at, mock_product_use_case
    ):
        # Arrange
        merchant_id = uuid4()

        # Act
        event = await use_case.create(
            user_id=uuid4(),
            type=EventType.TICKETS,
            data=NewEventData(name='Julebord', start_at=start_at, organization_id=organization_id),
            signup_details=_sign_up_details(start_at),
            tickets=TicketInformation(price=45000, merchant_id=merchant_id),
        )

        # Assert
        mock_product_use_case.create_ticket_product.assert_awaited_once()
        kwargs = mock_product_use_case.create_ticket_product.await_args.kwargs
        assert kwargs['price'] == 45000
        assert kwargs['merchant_id'] == merchant_id
        assert event.product_id == mock_product_use_case.create_ticket_product.return_value.id

    @pytest.mark.asyncio
    async def test_create_fail__not_member(
        self,
        use_case: EventCommandUseCase,
        organization_id,
        start_at,
        mock_permission_service,
        mock_event_repo,
    ):
        mock_permission_service.has_role.return_value = False

        with pytest.raises(PermissionDeniedError):
            await use_case.create(
                user_id=uuid4(),
                type=EventType.BASIC,
                data=NewEventData(name='Møte', start_at=start_at, organization_id=organization_id),
            )
        mock_event_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_fail__anonymous(
        self, use_case: EventCommandUseCase, organization_id, start_at
    ):
        with pytest.raises(UnauthorizedError):
            await use_case.create(
                user_id=None,
                type=EventType.BASIC,
                data=NewEventData(name='Møte', start_at=start_at, organization_id=organization_id),
            )


@pytest.mark.unit
class TestUpdateEvent:
    @pytest.mark.asyncio
    async def test_capacity_growth__enqueues_wait_list_promotion(
        self,
        use_case: EventCommandUseCase,
        organization_id,
        start_at,
        mock_event_repo,
        mock_job_queue,
    ):
        """
        Given: a full event
        When: its capacity is raised by five
        Then: five seats open up and the worker is asked to promote from the wait list
        """
        # Arrange
        slot = SlotEntity(capacity=10, remaining_capacity=0)
        event = _existing_event(organization_id, start_at, slot)
        mock_event_repo.get_by_id.return_value = event

        # Act
        updated = await use_case.update(
            user_id=uuid4(), event_id=event.id, data=EventUpdate(capacity=15)
        )

        # Assert
        assert updated.remaining_capacity == 5
        mock_job_queue.enqueue.assert_awaited_once_with(
            JobName.EVENT_CAPACITY_INCREASED, event_id=str(event.id)
        )

    @pytest.mark.asyncio
    async def test_rename_does_not_enqueue(
        self,
        use_case: EventCommandUseCase,
        organization_id,
        start_at,
        mock_event_repo,
        mock_job_queue,
    ):
        slot = SlotEntity(capacity=10, remaining_capacity=0)
        event = _existing_event(organization_id, start_at, slot)
        mock_event_repo.get_by_id.return_value = event

        updated = await use_case.update(
            user_id=uuid4(), event_id=event.id, data=EventUpdate(name='Fadderuke 2030')
        )

        assert updated.name == 'Fadderuke 2030'
        mock_job_queue.enqueue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_slot_fail__slot_has_sign_ups(
        self, use_case: EventCommandUseCase, organization_id, start_at, mock_event_repo
    ):
        slot = SlotEntity(capacity=10, remaining_capacity=3)
        event = _existing_event(organization_id, start_at, slot)
        mock_event_repo.get_by_id.return_value = event

        with pytest.raises(InvalidArgumentError, match='existing sign ups'):
            await use_case.update(
                user_id=uuid4(),
                event_id=event.id,
                data=EventUpdate(),
                slots=SlotChanges(delete=[slot.id]),
            )
        mock_event_repo.update.assert_not_awaited()


@pytest.mark.unit
class TestCategories:
    @pytest.mark.asyncio
    async def test_create_category_fail__not_super_user(self, use_case: EventCommandUseCase):
        with pytest.raises(PermissionDeniedError):
            await use_case.create_category(user_id=uuid4(), name='Sosialt')

    @pytest.mark.asyncio
    async def test_create_category_success(
        self, use_case: EventCommandUseCase, mock_permission_service, mock_event_repo
    ):
        mock_permission_service.is_super_user.return_value = True
        mock_event_repo.create_category.side_effect = lambda *, category: category

        category = await use_case.create_category(user_id=uuid4(), name='Sosialt')

        assert category.name == 'Sosialt'
