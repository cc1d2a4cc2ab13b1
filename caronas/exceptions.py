"""Custom exceptions for ride coordination."""


class CaronasError(Exception):
    """Base class for every error raised by the ride core."""
    pass


class DuplicateGroupError(CaronasError):
    """Raised when a group document already exists for a chat id."""

    def __init__(self, chat_id: int):
        super().__init__(f"Group {chat_id} already exists")
        self.chat_id = chat_id


class StoreUnavailableError(CaronasError):
    """Raised when the document store cannot be reached."""
    pass


class InvalidFieldPathError(CaronasError, ValueError):
    """Raised when a mutation path segment cannot be addressed safely."""
    pass


class RideCommandError(CaronasError, ValueError):
    """Raised when a chat command cannot be parsed into a ride intent."""
    pass
