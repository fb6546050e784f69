"""
Custom exceptions for the draft clock service

Services raise these; the scheduled auto-pick task turns draft aborts into
outcomes instead of letting them reach the worker.
"""


class DraftClockException(Exception):
    """Base exception for all draft clock errors."""
    pass


class APIException(DraftClockException):
    """Exception for API-related errors."""
    pass


class PersistenceConflict(APIException):
    """Raised when a conditional write loses to a concurrent update (HTTP 409)."""
    pass


class LeagueNotFoundError(DraftClockException):
    """Raised when a requested league cannot be found."""
    pass


class TeamNotFoundError(DraftClockException):
    """Raised when a requested team cannot be found."""
    pass


class PlayerNotFoundError(DraftClockException):
    """Raised when a requested player cannot be found."""
    pass


class DraftException(DraftClockException):
    """Exception for draft-related errors."""
    pass


class PreconditionMismatch(DraftException):
    """Raised when the draft moved on before a pick could be applied."""
    pass


class NoEligiblePlayersError(DraftException):
    """Raised when no undrafted player can legally join the team on the clock."""
    pass


class ValidationException(DraftClockException):
    """Exception for data validation errors."""
    pass


class ConfigurationException(DraftClockException):
    """Exception for configuration-related errors."""
    pass
