from csrfguard.errors import CsrfError, InvalidCsrfTokenError, NoCsrfTokenError
from csrfguard.guard import CsrfGuard, read_parsed_body
from csrfguard.tokens import TokenStore, new_token

__all__ = [
    "CsrfError",
    "CsrfGuard",
    "InvalidCsrfTokenError",
    "NoCsrfTokenError",
    "TokenStore",
    "new_token",
    "read_parsed_body",
]
