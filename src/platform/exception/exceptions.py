from enum import StrEnum


class ErrorCode(StrEnum):
    BAD_USER_INPUT = 'BAD_USER_INPUT'
    BAD_REQUEST = 'BAD_REQUEST'
    UNAUTHORIZED = 'UNAUTHORIZED'
    PERMISSION_DENIED = 'PERMISSION_DENIED'
    NOT_FOUND = 'NOT_FOUND'
    INTERNAL_SERVER_ERROR = 'INTERNAL_SERVER_ERROR'


# Codes whose message is safe to show to API clients
USER_FACING_ERROR_CODES = frozenset(
    {
        ErrorCode.BAD_USER_INPUT,
        ErrorCode.BAD_REQUEST,
        ErrorCode.UNAUTHORIZED,
        ErrorCode.PERMISSION_DENIED,
        ErrorCode.NOT_FOUND,
    }
)


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    @property
    def is_user_facing(self) -> bool:
        return self.code in USER_FACING_ERROR_CODES


class InvalidArgumentError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400, ErrorCode.BAD_USER_INPUT)


class BadRequestError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400, ErrorCode.BAD_REQUEST)


class AlreadySignedUpError(InvalidArgumentError):
    pass


class InvalidCapacityError(InvalidArgumentError):
    pass


class UnauthorizedError(CustomBaseError):
    def __init__(self, message: str = 'You must be logged in to perform this action.') -> None:
        super().__init__(message, 401, ErrorCode.UNAUTHORIZED)


class PermissionDeniedError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403, ErrorCode.PERMISSION_DENIED)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404, ErrorCode.NOT_FOUND)


class InternalServerError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500, ErrorCode.INTERNAL_SERVER_ERROR)


class DownstreamServiceError(CustomBaseError):
    """A third party (Feide, Vipps, Postmark, S3) failed or answered unexpectedly."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 502, ErrorCode.INTERNAL_SERVER_ERROR)
