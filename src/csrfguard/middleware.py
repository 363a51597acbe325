from typing import Callable

from fastapi import Request, Response
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse

from csrfguard.errors import CsrfError
from csrfguard.guard import CsrfGuard
from csrfguard.logging_config import get_logger
from csrfguard.settings import settings


class CsrfMiddleware(BaseHTTPMiddleware):
    """Reject POST/PUT/DELETE requests without a valid single-use token.

    Needs SessionMiddleware installed outside of it; the tokens live in
    ``request.session``.
    """

    def __init__(
        self,
        app,
        limit: int | None = None,
        session_key: str | None = None,
        form_key: str | None = None,
    ):
        super().__init__(app)
        self.limit = limit if limit is not None else settings.csrf_token_limit
        self.session_key = session_key if session_key is not None else settings.csrf_session_key
        self.form_key = form_key if form_key is not None else settings.csrf_form_key

    def build_guard(self, request: Request) -> CsrfGuard:
        return CsrfGuard(
            request.session,
            limit=self.limit,
            session_key=self.session_key,
            form_key=self.form_key,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        guard = self.build_guard(request)
        # Route handlers issue tokens through the same guard
        request.state.csrf_guard = guard
        logger = get_logger()

        try:
            return await guard.process(request, call_next)
        except CsrfError as exc:
            logger.warning(
                f"CSRF rejection: {request.method} {request.url.path} - {exc.detail}"
            )
            return PlainTextResponse(exc.detail, status_code=exc.status_code)
        except HTTPException as exc:
            # Unparseable bodies; this middleware runs outside the app's exception handlers
            logger.warning(
                f"Unreadable body: {request.method} {request.url.path} - {exc.detail}"
            )
            return PlainTextResponse(exc.detail, status_code=exc.status_code)
        finally:
            # Closes the parsed form and any spooled upload files; the route
            # parses its own copy from the cached body
            await request.close()
