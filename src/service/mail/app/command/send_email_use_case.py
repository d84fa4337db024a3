"""
Email rendering for the worker

Each email type loads what its template needs, builds the Postmark template
model and delivers it. Missing recipients or records raise NotFoundError, which
the worker treats as permanent.
"""

from datetime import datetime
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.membership_metrics import metrics
from src.service.cabin.app.interface.i_cabin_repo import ICabinRepo
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.mail.app.interface.i_email_client import IEmailClient
from src.service.mail.domain.email_entity import TEMPLATE_ALIASES, EmailContent, EmailRequest
from src.service.shared_kernel.domain.enum.email_type import EmailType
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.user.domain.user_entity import UserEntity


OSLO = ZoneInfo('Europe/Oslo')


def format_oslo_time(value: datetime) -> str:
    return value.astimezone(OSLO).strftime('%d.%m.%Y %H:%M')


def format_nok(price_ore: int) -> str:
    return f'{price_ore / 100:.2f} kr'


class SendEmailUseCase:
    def __init__(
        self,
        *,
        email_client: IEmailClient,
        user_query_repo: IUserQueryRepo,
        event_repo: IEventRepo,
        cabin_repo: ICabinRepo,
    ) -> None:
        self.email_client = email_client
        self.user_query_repo = user_query_repo
        self.event_repo = event_repo
        self.cabin_repo = cabin_repo

    @Logger.io
    async def send(self, *, email: EmailRequest) -> EmailContent:
        match email.type:
            case EmailType.USER_REGISTRATION:
                content = await self._user_registration(email)
            case EmailType.EVENT_WAIT_LIST_CONFIRMATION:
                content = await self._wait_list_confirmation(email)
            case EmailType.CABIN_BOOKING_RECEIPT:
                content = await self._cabin_booking_receipt(email)
            case _:
                raise InvalidArgumentError(f'Unknown email type {email.type}')

        try:
            await self.email_client.send(email=content)
        except Exception:
            metrics.record_email(email_type=email.type, result='failed')
            raise
        metrics.record_email(email_type=email.type, result='sent')
        return content

    async def _user_registration(self, email: EmailRequest) -> EmailContent:
        user = await self._get_user(email.recipient_id)
        study_program = None
        if user.study_program_id is not None:
            program = await self.user_query_repo.get_study_program(
                study_program_id=user.study_program_id
            )
            study_program = program.name if program else None
        return self._content(
            email.type,
            user.email,
            {
                'user': {
                    'firstName': user.first_name,
                    'lastName': user.last_name,
                    'studyProgram': study_program,
                }
            },
        )

    async def _wait_list_confirmation(self, email: EmailRequest) -> EmailContent:
        user = await self._get_user(email.recipient_id)
        if email.event_id is None:
            raise InvalidArgumentError('event_id is required')
        event = await self.event_repo.get_by_id(event_id=email.event_id)
        if event is None:
            raise NotFoundError(f'Event {email.event_id} not found')
        return self._content(
            email.type,
            user.email,
            {
                'event': {
                    'name': event.name,
                    'startAt': format_oslo_time(event.start_at),
                    'location': event.location,
                    'url': f'{settings.CLIENT_URL.rstrip("/")}/events/{event.id}',
                }
            },
        )

    async def _cabin_booking_receipt(self, email: EmailRequest) -> EmailContent:
        if email.booking_id is None:
            raise InvalidArgumentError('booking_id is required')
        booking = await self.cabin_repo.get_booking(booking_id=email.booking_id)
        if booking is None:
            raise NotFoundError(f'Booking {email.booking_id} not found')
        return self._content(
            email.type,
            booking.email,
            {
                'booking': {
                    'firstName': booking.first_name,
                    'lastName': booking.last_name,
                    'startDate': booking.start_date.strftime('%d.%m.%Y'),
                    'endDate': booking.end_date.strftime('%d.%m.%Y'),
                    'cabins': [cabin.name for cabin in booking.cabins],
                    'price': format_nok(booking.total_cost),
                }
            },
        )

    async def _get_user(self, user_id: UUID | None) -> UserEntity:
        if user_id is None:
            raise InvalidArgumentError('recipient_id is required')
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if user is None:
            raise NotFoundError(f'User {user_id} not found')
        return user

    @staticmethod
    def _content(email_type: EmailType, to: str, model: dict[str, Any]) -> EmailContent:
        return EmailContent(to=to, template_alias=TEMPLATE_ALIASES[email_type], template_model=model)
