from fastapi import Request

from csrfguard.guard import CsrfGuard, read_parsed_body
from csrfguard.settings import settings


def get_csrf_guard(request: Request) -> CsrfGuard:
    guard = getattr(request.state, "csrf_guard", None)
    if guard is None:
        guard = CsrfGuard(
            request.session,
            limit=settings.csrf_token_limit,
            session_key=settings.csrf_session_key,
            form_key=settings.csrf_form_key,
        )
        request.state.csrf_guard = guard
    return guard


def get_csrf_token(request: Request) -> str:
    """Issue a fresh token to embed in a form rendered for this request."""
    return get_csrf_guard(request).generate_token()


async def require_csrf(request: Request) -> None:
    # Route-level alternative to CsrfMiddleware; errors render as 403
    guard = get_csrf_guard(request)
    guard.check(request.method, await read_parsed_body(request))
