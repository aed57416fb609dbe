class FoodExpressError(Exception):
    pass


class ValidationError(FoodExpressError):
    """A required field is blank or malformed. Shown to the user, no state changes."""


class RemoteUnavailable(FoodExpressError):
    """The API could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageUnavailable(FoodExpressError):
    """Durable client storage failed. Callers of the store never see this."""
