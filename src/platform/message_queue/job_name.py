from enum import StrEnum


class JobName(StrEnum):
    """arq function names shared by producers (api) and the worker."""

    SEND_EMAIL = 'send_email'
    EVENT_CAPACITY_INCREASED = 'event_capacity_increased'
    POLL_PAYMENT_ATTEMPT = 'poll_payment_attempt'
    CAPTURE_PAYMENT = 'capture_payment'
