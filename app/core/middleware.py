"""Access guard for protected UI pages and the protected API namespace.

State per request: UNAUTHENTICATED -> reject, or AUTHENTICATED -> proceed.
Token validity is self-contained (signature + expiry); no database lookup,
so a token cannot be revoked before it expires.
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.config import Settings
from app.core.security import verify_token

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/", "/login", "/signup"})
UI_PREFIXES = ("/playground",)
API_PREFIXES = ("/api/protected",)
LOGIN_PATH = "/login"


def _matches(path: str, prefixes: tuple[str, ...]) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


class AccessGuardMiddleware(BaseHTTPMiddleware):
    """
    Gate requests on the identity cookie.

    - Missing cookie: UI -> redirect to login, API -> 401
    - Invalid/expired token: UI -> redirect to login and delete the cookie,
      API -> 401 with the cookie left alone
    - Valid token: claims stored on request.state.auth_user
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        if path in PUBLIC_PATHS:
            return await call_next(request)

        is_ui = _matches(path, UI_PREFIXES)
        is_api = _matches(path, API_PREFIXES)
        if not (is_ui or is_api):
            return await call_next(request)

        cookie_name = self.settings.AUTH_COOKIE_NAME
        token = request.cookies.get(cookie_name)

        if not token:
            if is_api:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Unauthorized"},
                )
            return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

        auth_user = verify_token(token, self.settings)
        if auth_user is None:
            logger.info(f"Rejected invalid or expired token on {path}")
            if is_api:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Invalid token"},
                )
            response = RedirectResponse(LOGIN_PATH, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
            response.delete_cookie(cookie_name)
            return response

        request.state.auth_user = auth_user
        return await call_next(request)
