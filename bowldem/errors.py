"""
Error Taxonomy

Exceptions raised by the services and translated into HTTP responses by the
controllers. Each carries the status code and the message shown to the client.
"""


class GameError(Exception):
    """Base class for every error the API knows how to answer."""
    status_code = 500
    public_message = "Internal server error"
    # Expected conditions are refusals, not failures, and are logged as such
    expected = False

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(GameError):
    """Missing or malformed request fields."""
    status_code = 400
    public_message = "Invalid request"
    expected = True


class GameAlreadyCompletedError(GameError):
    status_code = 400
    public_message = "Game already completed"
    expected = True


class DuplicateGuessError(GameError):
    status_code = 400
    public_message = "Player already guessed"
    expected = True


class InvalidCandidateError(GameError):
    status_code = 400
    public_message = "Invalid player"
    expected = True


class IdentityError(GameError):
    status_code = 401
    public_message = "Authentication required"
    expected = True


class ConcurrentUpdateError(GameError):
    """Another request for the same key won the write; safe to retry."""
    status_code = 409
    public_message = "Concurrent update, please retry"
    expected = True


class PuzzleNotFoundError(GameError):
    """No puzzle can be resolved. This is a configuration problem."""
    status_code = 500
    public_message = "No puzzle available"


class StorageError(GameError):
    status_code = 500
    public_message = "Storage unavailable"
