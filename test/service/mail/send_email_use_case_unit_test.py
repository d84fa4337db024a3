"""
Unit tests for the mail service

Test Focus:
1. MailPublisherImpl only enqueues; the payload survives the job kwargs
2. SendEmailUseCase builds the template model per email type
3. Missing records raise NotFoundError so the worker drops the job
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    DownstreamServiceError,
    InvalidArgumentError,
    NotFoundError,
)
from src.platform.message_queue.job_name import JobName
from src.service.cabin.domain.cabin_entity import BookingEntity, CabinEntity
from src.service.event.domain.event_entity import EventEntity
from src.service.mail.app.command.send_email_use_case import (
    SendEmailUseCase,
    format_nok,
    format_oslo_time,
)
from src.service.mail.domain.email_entity import EmailRequest
from src.service.mail.driven_adapter.message_queue.mail_publisher_impl import MailPublisherImpl
from src.service.shared_kernel.domain.enum.email_type import EmailType
from src.service.user.domain.user_entity import StudyProgramEntity, UserEntity


@pytest.fixture
def user() -> UserEntity:
    return UserEntity.create(
        feide_id='feide-1',
        email='ola@indokntnu.no',
        first_name='Ola',
        last_name='Nordmann',
        username='olanor',
    )


@pytest.fixture
def mock_email_client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_user_query_repo(user: UserEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = user
    repo.get_study_program.return_value = None
    return repo


@pytest.fixture
def mock_event_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_cabin_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def use_case(mock_email_client, mock_user_query_repo, mock_event_repo, mock_cabin_repo):
    return SendEmailUseCase(
        email_client=mock_email_client,
        user_query_repo=mock_user_query_repo,
        event_repo=mock_event_repo,
        cabin_repo=mock_cabin_repo,
    )


@pytest.mark.unit
class TestMailPublisher:
    @pytest.mark.asyncio
    async def test_wait_list_confirmation_is_enqueued(self):
        # Arrange
        job_queue = AsyncMock()
        publisher = MailPublisherImpl(job_queue=job_queue)
        event_id, recipient_id = uuid4(), uuid4()

        # Act
        await publisher.send_wait_list_confirmation(event_id=event_id, recipient_id=recipient_id)

        # Assert
        job_queue.enqueue.assert_awaited_once()
        args, kwargs = job_queue.enqueue.await_args
        assert args == (JobName.SEND_EMAIL,)
        assert EmailRequest.from_job_kwargs(**kwargs) == EmailRequest(
            type=EmailType.EVENT_WAIT_LIST_CONFIRMATION,
            event_id=event_id,
            recipient_id=recipient_id,
        )

    @pytest.mark.asyncio
    async def test_booking_receipt_has_no_recipient_user(self):
        job_queue = AsyncMock()
        publisher = MailPublisherImpl(job_queue=job_queue)
        booking_id = uuid4()

        await publisher.send_cabin_booking_receipt(booking_id=booking_id)

        kwargs = job_queue.enqueue.await_args.kwargs
        assert kwargs['type'] == 'CABIN_BOOKING_RECEIPT'
        assert kwargs['booking_id'] == str(booking_id)
        assert kwargs['recipient_id'] is None


@pytest.mark.unit
class TestSendEmail:
    @pytest.mark.asyncio
    async def test_user_registration(
        self, use_case: SendEmailUseCase, user: UserEntity, mock_user_query_repo, mock_email_client
    ):
        # Arrange
        program = StudyProgramEntity(name='Indøk', external_id='MIIØ')
        user.study_program_id = program.id
        mock_user_query_repo.get_study_program.return_value = program

        # Act
        content = await use_case.send(
            email=EmailRequest(type=EmailType.USER_REGISTRATION, recipient_id=user.id)
        )

        # Assert
        assert content.to == 'ola@indokntnu.no'
        assert content.template_alias == 'user-registration'
        assert content.template_model['user'] == {
            'firstName': 'Ola',
            'lastName': 'Nordmann',
            'studyProgram': 'Indøk',
        }
        mock_email_client.send.assert_awaited_once_with(email=content)

    @pytest.mark.asyncio
    async def test_wait_list_confirmation__oslo_time(
        self, use_case: SendEmailUseCase, user: UserEntity, mock_event_repo
    ):
        """
        Given: an event starting 17:00 UTC in winter
        When: the wait list confirmation is rendered
        Then: the start is shown in Oslo time (UTC+1)
        """
        start_at = datetime(2030, 1, 15, 17, 0, tzinfo=timezone.utc)
        event = EventEntity(
            name='Fadderuke',
            start_at=start_at,
            end_at=start_at,
            organization_id=uuid4(),
            location='Kjel4',
        )
        mock_event_repo.get_by_id.return_value = event

        content = await use_case.send(
            email=EmailRequest(
                type=EmailType.EVENT_WAIT_LIST_CONFIRMATION,
                recipient_id=user.id,
                event_id=event.id,
            )
        )

        assert content.template_alias == 'event-wait-list'
        assert content.template_model['event']['startAt'] == '15.01.2030 18:00'
        assert content.template_model['event']['location'] == 'Kjel4'
        assert content.template_model['event']['url'].endswith(f'/events/{event.id}')

    @pytest.mark.asyncio
    async def test_cabin_booking_receipt(self, use_case: SendEmailUseCase, mock_cabin_repo):
        cabin = CabinEntity.create(
            name='Bjørnen', capacity=18, internal_price=1000, external_price=2500
        )
        booking = BookingEntity(
            start_date=date(2030, 3, 4),
            end_date=date(2030, 3, 6),
            email='kari@indokntnu.no',
            first_name='Kari',
            last_name='Nordmann',
            phone_number='+4791234567',
            cabins=[cabin],
            internal_participants=4,
        )
        mock_cabin_repo.get_booking.return_value = booking

        content = await use_case.send(
            email=EmailRequest(type=EmailType.CABIN_BOOKING_RECEIPT, booking_id=booking.id)
        )

        assert content.to == 'kari@indokntnu.no'
        assert content.template_model['booking']['cabins'] == ['Bjørnen']
        assert content.template_model['booking']['startDate'] == '04.03.2030'
        assert content.template_model['booking']['price'] == format_nok(booking.total_cost)

    @pytest.mark.asyncio
    async def test_unknown_recipient_raises_not_found(
        self, use_case: SendEmailUseCase, mock_user_query_repo, mock_email_client
    ):
        mock_user_query_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.send(
                email=EmailRequest(type=EmailType.USER_REGISTRATION, recipient_id=uuid4())
            )
        mock_email_client.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_booking_id_is_invalid(self, use_case: SendEmailUseCase):
        with pytest.raises(InvalidArgumentError):
            await use_case.send(email=EmailRequest(type=EmailType.CABIN_BOOKING_RECEIPT))

    @pytest.mark.asyncio
    async def test_delivery_failure_propagates(
        self, use_case: SendEmailUseCase, user: UserEntity, mock_email_client
    ):
        mock_email_client.send.side_effect = DownstreamServiceError('Postmark is down')

        with pytest.raises(DownstreamServiceError):
            await use_case.send(
                email=EmailRequest(type=EmailType.USER_REGISTRATION, recipient_id=user.id)
            )


@pytest.mark.unit
class TestFormatting:
    def test_summer_time_is_utc_plus_two(self):
        assert format_oslo_time(datetime(2030, 6, 1, 10, 0, tzinfo=timezone.utc)) == (
            '01.06.2030 12:00'
        )

    def test_nok_from_ore(self):
        assert format_nok(45050) == '450.50 kr'
