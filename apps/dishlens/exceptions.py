"""DishLens client exceptions."""

RESCAN_QR_MESSAGE = (
    "This table link has expired. Please rescan the QR code at your table."
)
SESSION_EXPIRED_MESSAGE = (
    "Your session expired. Please rescan the QR code or refresh the page."
)
MISSING_SESSION_MESSAGE = (
    "Missing table session. Refresh the page or use ?table=1 or scan the QR."
)


class DishLensError(Exception):
    """Base exception for DishLens client errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DishLensAPIError(DishLensError):
    """The DishLens API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body

    @property
    def is_session_expired(self) -> bool:
        """Whether the API rejected a token or session as expired or revoked."""
        text = self.message.lower()
        return (
            "expired" in text or "revoked" in text or "invalid session" in text
        )


class DishLensRateLimitError(DishLensAPIError):
    """Too many requests, e.g. repeated waiter calls from one session."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        response_body: object | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message, status_code, response_body)
        self.retry_after = retry_after


class DishLensConnectionError(DishLensError):
    """The API could not be reached at all."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class SessionExpiredError(DishLensError):
    """
    A QR access token or table session is expired or revoked.

    ``message`` is safe to show to the customer as-is.
    """

    def __init__(self, message: str = RESCAN_QR_MESSAGE) -> None:
        super().__init__(message)


class MissingTableSessionError(DishLensError):
    """An action needs a table session (with its secret) and none is held."""

    def __init__(self, message: str = MISSING_SESSION_MESSAGE) -> None:
        super().__init__(message)


class OrderSubmissionError(DishLensError):
    """Order creation failed; the cart is left untouched so it can be resent."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageError(DishLensError):
    """A storage backend could not read or write a value."""
