from typing import Iterator

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from src.platform.exception.exceptions import CustomBaseError, ErrorCode


INTERNAL_ERROR_MESSAGE = 'Internal server error'


class ErrorCodeExtension(SchemaExtension):
    """
    Attach `extensions.code` to every error in the response.

    Domain errors keep their message when their code is user facing. Everything else
    (downstream failures, unexpected exceptions) is replaced by a generic message so
    internals never reach the client.
    """

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        if not result or not result.errors:
            return
        result.errors = [format_error(error) for error in result.errors]


def format_error(error: GraphQLError) -> GraphQLError:
    original = error.original_error
    if original is None:
        # Parse and validation errors
        return _with_code(error, error.message, ErrorCode.BAD_REQUEST)
    if isinstance(original, CustomBaseError) and original.is_user_facing:
        return _with_code(error, original.message, original.code)
    return _with_code(error, INTERNAL_ERROR_MESSAGE, ErrorCode.INTERNAL_SERVER_ERROR)


def _with_code(error: GraphQLError, message: str, code: ErrorCode) -> GraphQLError:
    return GraphQLError(
        message,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        extensions={**(error.extensions or {}), 'code': code.value},
    )
