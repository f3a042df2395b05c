"""
Rest compliance exceptions.

All service-layer failures derive from RestComplianceError so views can
map them onto HTTP responses in one place.
"""


class RestComplianceError(Exception):
    """Exception raised when a rest compliance calculation fails."""

    pass


class MalformedInputError(RestComplianceError, ValueError):
    """Exception raised when an input field cannot be interpreted."""

    pass


class MalformedDateError(MalformedInputError):
    """Exception raised when a timestamp or calendar date cannot be parsed."""

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid date value for {field}: {value!r}")
