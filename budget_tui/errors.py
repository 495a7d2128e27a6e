"""Exception types shared across the application."""


class BudgetTuiError(Exception):
    """Base class for all application errors."""


class RecoverableError(BudgetTuiError):
    """Failure reported to the user as a notification instead of crashing."""


class StorageError(RecoverableError):
    """The storage collaborator could not complete an operation."""


class InvalidValueError(RecoverableError):
    """Edited cell text could not be converted back into a field value."""


class ChannelClosed(BudgetTuiError):
    """The other end of an event channel has gone away."""


class RenderError(BudgetTuiError):
    """The layout could not be computed; not recoverable."""
