from fastapi import HTTPException, status


class CsrfError(HTTPException):
    detail_message = "CSRF check failed"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail or self.detail_message,
        )


class NoCsrfTokenError(CsrfError):
    """The submitted body carries no token field."""

    detail_message = "CSRF token missing"


class InvalidCsrfTokenError(CsrfError):
    """The submitted token is unknown, already used or evicted."""

    detail_message = "CSRF token invalid"
