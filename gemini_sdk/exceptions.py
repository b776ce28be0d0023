"""Exception hierarchy for the SDK."""


class GeminiError(Exception):
    """Base class for every error raised by the SDK.

    Raised directly for failures that do not fit a more specific category.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        original_error: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.original_error = original_error

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message}"


class GeminiValidationError(GeminiError):
    """Input failed validation before reaching the network."""

    def __init__(
        self,
        message: str,
        field_errors: dict[str, str] | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field_errors = field_errors or {}

    def __str__(self) -> str:
        if not self.field_errors:
            return super().__str__()
        return f"{super().__str__()} (fields: {self.field_errors})"


class GeminiAuthError(GeminiError):
    """Credentials were missing or rejected."""


class GeminiRateLimitError(GeminiError):
    """The provider asked us to slow down."""

    def __init__(self, message: str, retry_after: float = 60.0, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    def __str__(self) -> str:
        return f"{super().__str__()} (retry after: {self.retry_after}s)"


class GeminiNetworkError(GeminiError):
    """Transport failure. Always eligible for retry."""

    def __init__(self, message: str, status_code: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return super().__str__()
        return f"{super().__str__()} (status: {self.status_code})"


class GeminiTimeoutError(GeminiNetworkError):
    """The request did not complete within the configured timeout."""


class GeminiServerError(GeminiNetworkError):
    """The provider answered with a 5xx status."""


class GeminiAPIError(GeminiError):
    """HTTP error status that maps to no other category."""

    def __init__(self, message: str, status_code: int, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{super().__str__()} (status: {self.status_code})"


class GeminiParseError(GeminiError):
    """A response body did not match the expected structure."""


class UnsupportedContentError(GeminiError):
    """Content variant the SDK does not know how to handle."""


RETRYABLE_ERRORS: tuple[type[GeminiError], ...] = (
    GeminiNetworkError,
    GeminiRateLimitError,
)
