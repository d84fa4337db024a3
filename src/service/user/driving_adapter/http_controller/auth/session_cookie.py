from fastapi import Response

from src.platform.config.core_setting import settings
from src.service.user.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


def set_session_cookie(response: Response, *, token: str, jwt_auth: JwtAuth) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=jwt_auth.max_age_seconds,
        domain=settings.SESSION_COOKIE_DOMAIN,
        httponly=settings.SESSION_COOKIE_HTTP_ONLY,
        samesite='lax',
        secure=settings.SESSION_COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        domain=settings.SESSION_COOKIE_DOMAIN,
        httponly=settings.SESSION_COOKIE_HTTP_ONLY,
        samesite='lax',
        secure=settings.SESSION_COOKIE_SECURE,
    )
