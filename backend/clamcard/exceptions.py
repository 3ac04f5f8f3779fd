"""Exceptions raised by the ClamCard system."""


class CardError(Exception):
    """Base class for all card errors."""


class InvalidArgumentError(CardError, ValueError):
    """A required collaborator or station reference was missing."""


class JourneyError(CardError):
    """A journey operation was called in the wrong card state."""


class JourneyConflictError(JourneyError):
    """A journey is already underway."""


class NoJourneyInProgressError(JourneyError):
    """No journey is currently underway."""


class StationNotFoundError(CardError, LookupError):
    """Station name is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"Station '{name}' does not exist")
        self.name = name
