"""
Unit tests for the REST exception handlers

Test Focus:
1. Every handler answers with `detail` and `code`
2. Internal errors are masked behind a generic detail
"""

from unittest.mock import MagicMock

import orjson
import pytest
from fastapi.exceptions import RequestValidationError

from src.platform.exception.exception_handlers import (
    INTERNAL_ERROR_DETAIL,
    custom_error_handler,
    general_500_exception_handler,
    validation_error_handler,
    value_error_handler,
)
from src.platform.exception.exceptions import (
    DownstreamServiceError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)


def _body(response) -> dict:
    return orjson.loads(response.body)


@pytest.mark.unit
class TestExceptionHandlers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'error,status_code,code',
        [
            (InvalidArgumentError('Name is too long'), 400, 'BAD_USER_INPUT'),
            (UnauthorizedError(), 401, 'UNAUTHORIZED'),
            (NotFoundError('Listing not found'), 404, 'NOT_FOUND'),
        ],
    )
    async def test_user_facing_error_keeps_message_and_code(self, error, status_code, code):
        response = await custom_error_handler(MagicMock(), error)

        assert response.status_code == status_code
        assert _body(response) == {'detail': error.message, 'code': code}

    @pytest.mark.asyncio
    async def test_downstream_error_is_masked(self):
        response = await custom_error_handler(
            MagicMock(), DownstreamServiceError('Postmark answered 422: invalid token')
        )

        assert response.status_code == 502
        assert _body(response) == {
            'detail': INTERNAL_ERROR_DETAIL,
            'code': 'INTERNAL_SERVER_ERROR',
        }

    @pytest.mark.asyncio
    async def test_value_error_is_bad_user_input(self):
        response = await value_error_handler(MagicMock(), ValueError('month must be 1..12'))

        assert response.status_code == 400
        assert _body(response) == {'detail': 'month must be 1..12', 'code': 'BAD_USER_INPUT'}

    @pytest.mark.asyncio
    async def test_request_validation_error_is_bad_request(self):
        error = RequestValidationError(
            [{'loc': ('query', 'redirect'), 'msg': 'Field required', 'type': 'missing'}]
        )

        response = await validation_error_handler(MagicMock(), error)

        body = _body(response)
        assert response.status_code == 400
        assert body['code'] == 'BAD_REQUEST'
        assert body['detail'][0]['msg'] == 'Field required'

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self):
        response = await general_500_exception_handler(MagicMock(), KeyError('secret'))

        assert response.status_code == 500
        assert _body(response) == {
            'detail': INTERNAL_ERROR_DETAIL,
            'code': 'INTERNAL_SERVER_ERROR',
        }
