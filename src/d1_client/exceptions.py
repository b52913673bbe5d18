"""
DataONE Client Exceptions

Custom exception hierarchy for node registry operations.
"""


class D1Error(Exception):
    """Base DataONE client exception."""

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class D1ParseError(D1Error):
    """Malformed XML returned by the service."""

    def __init__(self, message: str = "Error parsing XML"):
        super().__init__(message)


class D1ConfigurationError(D1Error):
    """Unrecognized Coordinating Node environment."""

    def __init__(self, environment: str):
        super().__init__(f"Unrecognized CN environment: {environment}")
        self.environment = environment


class D1ValidationError(D1Error):
    """An enumerated field holds a value outside its allowed set."""

    def __init__(self, field: str, value: str, allowed):
        self.field = field
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"The value of {field} must be one of {', '.join(self.allowed)} (got '{value}')"
        )


class D1CoercionError(D1Error):
    """A field value could not be converted to its declared type."""

    def __init__(self, field: str, value: str, type_name: str):
        super().__init__(f"Cannot convert {field}='{value}' to {type_name}")
        self.field = field
        self.value = value


class D1ConnectionError(D1Error):
    """Request to the Coordinating Node failed."""

    def __init__(self, message: str = "Connection failed"):
        super().__init__(message)


class D1ResponseError(D1Error):
    """Coordinating Node replied with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"Unexpected response from {url}", code=status_code)
        self.url = url
