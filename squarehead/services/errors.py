# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain errors raised by the scheduling core and the services around it.
Controllers translate these into HTTP status codes.
"""


class SquareheadError(Exception):
    """Base class for all domain failures."""


class InsufficientMembers(SquareheadError):
    """Fewer than two assignable members; a generation batch cannot run."""

    def __init__(self, available: int) -> None:
        super().__init__(
            f"At least 2 assignable members are required, found {available}"
        )
        self.available = available


class InvalidOffset(SquareheadError, ValueError):
    """A configured reminder offset is negative (or not an integer)."""

    def __init__(self, offset) -> None:
        super().__init__(f"Invalid reminder offset: {offset!r}")
        self.offset = offset


class InvalidScheduleDates(SquareheadError, ValueError):
    """Dates given to the assignment engine are empty or repeated."""


class MemberValidationError(SquareheadError, ValueError):
    """A member write would break a directory invariant."""


class AssignmentValidationError(SquareheadError, ValueError):
    """A manual assignment edit would break an assignment invariant."""


class NotFoundError(SquareheadError, KeyError):
    """Requested record does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Not found"
