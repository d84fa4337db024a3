"""
Unit tests for job_handler

Test Focus:
1. Downstream failures are retried through arq's Retry
2. Domain errors are logged and the job is dropped
3. Unexpected errors propagate; trace_context is not passed to the job
"""

import pytest
from arq import Retry

from src.platform.exception.exceptions import (
    DownstreamServiceError,
    InvalidArgumentError,
    NotFoundError,
)
from src.platform.message_queue.job_handler import RETRY_DELAY_SECONDS, job_handler


@pytest.mark.unit
class TestJobHandler:
    @pytest.mark.asyncio
    async def test_result_is_returned_and_trace_context_stripped(self):
        # Given: a job that echoes its kwargs
        @job_handler('echo')
        async def echo(ctx, **kwargs):
            return kwargs

        # When
        result = await echo({'job_try': 1}, trace_context={'traceparent': 'x'}, value=1)

        # Then
        assert result == {'value': 1}
        assert echo.__name__ == 'echo'

    @pytest.mark.asyncio
    async def test_downstream_error_is_retried(self):
        @job_handler('flaky')
        async def flaky(ctx):
            raise DownstreamServiceError('Vipps timed out')

        with pytest.raises(Retry) as exc_info:
            await flaky({'job_try': 1})

        assert exc_info.value.defer_score == RETRY_DELAY_SECONDS * 1000

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'error', [NotFoundError('User not found'), InvalidArgumentError('bad payload')]
    )
    async def test_domain_error_drops_the_job(self, error):
        @job_handler('doomed')
        async def doomed(ctx):
            raise error

        assert await doomed({'job_try': 1}) is None

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self):
        @job_handler('broken')
        async def broken(ctx):
            raise RuntimeError('boom')

        with pytest.raises(RuntimeError):
            await broken({'job_try': 1})
