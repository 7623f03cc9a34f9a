class ShortenerError(Exception):
    """Base class for errors that the HTTP layer turns into a response."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(ShortenerError):
    status_code = 400
    message = "Invalid URL"


class NotFound(ShortenerError):
    status_code = 404
    message = "URL not found"


class GenerationExhausted(ShortenerError):
    """No free short code could be claimed within the retry budget."""

    status_code = 503
    message = "Could not allocate a short code, please retry"


class StoreUnavailable(ShortenerError):
    status_code = 503
    message = "Storage temporarily unavailable, please retry"


class Timeout(ShortenerError):
    status_code = 504
    message = "Request timed out, please retry"
