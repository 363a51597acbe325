"""Bounded FIFO store of single-use CSRF tokens kept inside a session mapping.

The session is owned by the caller. The store only reads and writes one key in
it and never assumes exclusive access to the mapping. Reads and writes are not
atomic: callers must serialise access to a given session's token key.
"""

from collections import deque
from collections.abc import MutableMapping
import secrets
from typing import Any

from csrfguard.errors import InvalidCsrfTokenError
from csrfguard.logging_config import get_logger

DEFAULT_SESSION_KEY = "csrf.token"
DEFAULT_LIMIT = 50
TOKEN_BYTES = 16

logger = get_logger()


def new_token() -> str:
    """Return 128 random bits as 32 lowercase hex characters."""
    return secrets.token_hex(TOKEN_BYTES)


class TokenStore:
    def __init__(
        self,
        session: MutableMapping[str, Any],
        key: str = DEFAULT_SESSION_KEY,
        limit: int = DEFAULT_LIMIT,
    ):
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        self._session = session
        self.key = key
        self.limit = limit

    def _load(self) -> deque:
        return deque(self._session.get(self.key) or ())

    def _save(self, tokens: deque) -> None:
        # Plain list so JSON-backed sessions can serialise it
        self._session[self.key] = list(tokens)

    def tokens(self) -> list[str]:
        """Live tokens, oldest first."""
        return list(self._load())

    def __len__(self) -> int:
        return len(self._load())

    def __contains__(self, candidate: object) -> bool:
        return self._find(self._load(), candidate) is not None

    def issue(self) -> str:
        token = new_token()
        tokens = self._load()
        tokens.append(token)
        self._save(self._evict(tokens))
        logger.debug(f"CSRF token issued under {self.key!r} ({len(tokens)} live)")
        return token

    def consume(self, candidate: object) -> None:
        """Remove ``candidate`` from the live tokens.

        Raises InvalidCsrfTokenError, leaving the session untouched, when the
        candidate was never issued, was already consumed or has been evicted.
        """
        tokens = self._load()
        index = self._find(tokens, candidate)
        if index is None:
            raise InvalidCsrfTokenError()

        del tokens[index]
        self._save(tokens)
        logger.debug(f"CSRF token consumed under {self.key!r} ({len(tokens)} live)")

    def _evict(self, tokens: deque) -> deque:
        # Only the single step past the limit is trimmed, oldest first
        if len(tokens) == self.limit + 1:
            tokens.popleft()
        return tokens

    @staticmethod
    def _find(tokens: deque, candidate: object) -> int | None:
        if not isinstance(candidate, str):
            return None
        wanted = candidate.encode()
        for index, token in enumerate(tokens):
            if isinstance(token, str) and secrets.compare_digest(token.encode(), wanted):
                return index
        return None
