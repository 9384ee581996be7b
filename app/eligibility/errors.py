"""Eligibility engine error taxonomy."""


class EligibilityError(Exception):
    """Base exception for eligibility evaluation errors."""

    pass


class ValidationError(EligibilityError):
    """Malformed or out-of-range evaluation input.

    Raised before any threshold lookup or classifier runs. Carries every
    problem found so the caller can report them together.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid evaluation input")


class ConfigurationError(EligibilityError):
    """No usable threshold table for the requested date, or a malformed table."""

    pass


class StaleThresholdWarning(UserWarning):
    """The resolved threshold table is past its effective window.

    Never raised by the engine. Logged so operators know a newer table
    needs publishing; evaluation proceeds with the most recent table.
    """

    pass
