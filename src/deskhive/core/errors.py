"""Error kinds raised by the functional core."""


class DeskHiveError(Exception):
    """Base class for core failures."""

    pass


class NotFound(DeskHiveError):
    """Raised when a referenced group or todo id does not exist."""

    pass


class InvalidArgument(DeskHiveError):
    """Raised for structurally invalid requests (bad index, mismatched group)."""

    pass


class OutOfRange(DeskHiveError):
    """Raised when a date falls outside the supported lunisolar table."""

    pass
