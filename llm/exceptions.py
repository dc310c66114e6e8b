"""Common exception definitions."""


class LLMConfigError(RuntimeError):
    """Configuration error."""


class LLMValidationError(ValueError):
    """Input validation error."""


class LLMEncodingError(LLMValidationError):
    """Request body could not be serialized."""


class LLMTransportError(RuntimeError):
    """Transport layer error."""


class LLMHTTPError(LLMTransportError):
    """Non-success HTTP status returned by the API."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class LLMDecodingError(RuntimeError):
    """Response body does not match the expected shape."""


__all__ = [
    "LLMConfigError",
    "LLMValidationError",
    "LLMEncodingError",
    "LLMTransportError",
    "LLMHTTPError",
    "LLMDecodingError",
]
