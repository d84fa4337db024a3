"""Email Type Enum"""

from enum import StrEnum


class EmailType(StrEnum):
    USER_REGISTRATION = 'user-registration'
    EVENT_WAIT_LIST_CONFIRMATION = 'event-wait-list-confirmation'
    CABIN_BOOKING_RECEIPT = 'cabin-booking-receipt'
