"""Programmer errors raised by the cascade engine.

Expected absence (a missing map, language or field) is never an error; it
resolves to the next tier. These exceptions mean a caller classified or
routed something wrongly and must not be silently absorbed.
"""


class CascadeError(ValueError):
    """Base class for cascade programmer errors."""


class UnknownFieldError(CascadeError):
    def __init__(self, field: str):
        super().__init__(f"Unknown field: {field!r}")
        self.field = field


class PhaseError(CascadeError):
    """A field was read or written in a phase that has no tier for it."""


class MissingCommonDefaultError(CascadeError):
    """Attempt to clear a common default, which has no lower fallback."""

    def __init__(self, field: str):
        super().__init__(f"Common default {field!r} cannot be cleared")
        self.field = field


class MissingInstanceError(CascadeError):
    """INSTANCE_LANG write without an instance to write into."""


class PhaseClassificationError(CascadeError):
    """Edit context inputs do not describe a valid phase."""
