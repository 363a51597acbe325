from collections.abc import Callable, Mapping, MutableMapping
import inspect
import json
from typing import Any

from starlette.requests import Request

from csrfguard.errors import NoCsrfTokenError
from csrfguard.logging_config import get_logger
from csrfguard.tokens import DEFAULT_LIMIT, DEFAULT_SESSION_KEY, TokenStore

DEFAULT_FORM_KEY = "_token"
PROTECTED_METHODS = frozenset({"POST", "PUT", "DELETE"})

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

logger = get_logger()


async def read_parsed_body(request: Request) -> Mapping[str, Any] | None:
    """Return the submitted fields of ``request`` or None when it has none.

    Form bodies come back as Starlette form data, JSON bodies only when the
    top-level value is an object.
    """
    # Cache the raw body first so handlers behind BaseHTTPMiddleware can re-read it
    raw = await request.body()
    if not raw:
        return None

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        return await request.form()

    if content_type.startswith("application/json"):
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    return None


class CsrfGuard:
    """Gate POST/PUT/DELETE requests behind a single-use token.

    Safe methods always reach the next handler. Protected methods must carry
    ``form_key`` in their body with a token previously returned by
    ``generate_token``; the token is consumed on success.
    """

    def __init__(
        self,
        session: MutableMapping[str, Any],
        limit: int = DEFAULT_LIMIT,
        session_key: str = DEFAULT_SESSION_KEY,
        form_key: str = DEFAULT_FORM_KEY,
    ):
        if not isinstance(session, MutableMapping):
            raise TypeError(
                f"session must be a mutable mapping, got {type(session).__name__}"
            )

        self._store = TokenStore(session, key=session_key, limit=limit)
        self._form_key = form_key

    @property
    def limit(self) -> int:
        return self._store.limit

    @property
    def session_key(self) -> str:
        return self._store.key

    @property
    def form_key(self) -> str:
        return self._form_key

    @property
    def store(self) -> TokenStore:
        return self._store

    def generate_token(self) -> str:
        return self._store.issue()

    def check(self, method: str, body: Mapping[str, Any] | None) -> None:
        if method not in PROTECTED_METHODS:
            return

        params = body if body is not None else {}
        if self._form_key not in params:
            raise NoCsrfTokenError()

        self._store.consume(params[self._form_key])

    async def process(self, request: Request, call_next: Callable) -> Any:
        if request.method in PROTECTED_METHODS:
            body = await read_parsed_body(request)
            self.check(request.method, body)
            logger.debug(f"CSRF check passed: {request.method} {request.url.path}")

        result = call_next(request)
        if inspect.isawaitable(result):
            result = await result
        return result
