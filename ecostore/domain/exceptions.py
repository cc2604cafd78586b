"""Exceptions raised by EcoStore stores and managers."""


class EconomyError(RuntimeError):
    """Base class for EcoStore exceptions."""

    code = "ECONOMY_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class InvalidTypeError(EconomyError):
    """Raised when an argument or a stored value has the wrong kind."""

    code = "INVALID_TYPE"


class InvalidPathError(EconomyError):
    """Raised when a dot-path is malformed or descends through a non-mapping."""

    code = "INVALID_PATH"

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message or f"Invalid path '{path}'")
        self.path = path


class InvalidInputError(EconomyError):
    """Raised when a well-typed argument is not acceptable."""

    code = "INVALID_INPUT"


class StorageIOError(EconomyError):
    """Raised when the backing storage is unusable or a remote call times out."""

    code = "STORAGE_IO_ERROR"


class ItemNotFoundError(EconomyError):
    """Raised when an inventory or history entry does not exist."""

    code = "ITEM_NOT_FOUND"


class CurrencyNotFoundError(ItemNotFoundError):
    """Raised when a guild has no currency matching the given id or name."""

    code = "CURRENCY_NOT_FOUND"
