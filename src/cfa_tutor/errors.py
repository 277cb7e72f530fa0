"""Errors raised by study plan generation."""


class PlannerError(Exception):
    """Base class for study plan generation failures."""


class InvalidInputError(PlannerError):
    """Malformed input, or input referencing a topic that does not exist."""


class InvalidRangeError(PlannerError):
    """Date range or time budget constraints cannot be satisfied."""


class EmptySelectionError(PlannerError):
    """Topic filters eliminated every candidate focus area."""


class PlanTruncatedWarning(UserWarning):
    """Requested study time exceeded the horizon and was scaled down.

    Attached to a successful plan; not raised.
    """

    def __init__(self, requested_minutes: int, available_minutes: int):
        self.requested_minutes = requested_minutes
        self.available_minutes = available_minutes
        self.scale = round(available_minutes / requested_minutes, 4) if requested_minutes else 1.0
        super().__init__(
            f"Requested {requested_minutes} minutes but only {available_minutes} are available; "
            f"all focus areas scaled to {self.scale:.0%}"
        )

    def __eq__(self, other):
        if not isinstance(other, PlanTruncatedWarning):
            return NotImplemented
        return (self.requested_minutes, self.available_minutes) == (
            other.requested_minutes, other.available_minutes,
        )

    def __hash__(self):
        return hash((self.requested_minutes, self.available_minutes))
