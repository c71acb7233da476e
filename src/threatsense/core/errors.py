from typing import Iterable


class InvalidPayloadError(ValueError):
    """Raised when a threat event payload lacks one of the required fields."""

    def __init__(self, missing_fields: Iterable[str] = (), message: str | None = None):
        self.missing_fields = list(missing_fields)
        if message is None:
            message = "Invalid threat event payload structure"
            if self.missing_fields:
                message += f" (missing: {', '.join(self.missing_fields)})"
        super().__init__(message)
