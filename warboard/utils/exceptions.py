"""
Custom exceptions for the war leaderboard with user-friendly error messages.
"""

class WarboardException(Exception):
    """Base exception for war leaderboard errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ValidationError(WarboardException):
    """Raised when a value is rejected at commit time (user-correctable)."""
    def __init__(self, reason: str, details: str = None):
        super().__init__(
            f"Validation failed: {details or reason}",
            reason
        )

class ConflictError(WarboardException):
    """Raised when a clan or player name is already taken."""
    def __init__(self, reason: str):
        super().__init__(
            f"Conflict: {reason}",
            reason
        )

class NotFoundError(WarboardException):
    """Raised when a clan or player no longer exists (stale id)."""
    def __init__(self, kind: str, identifier=None, user_message: str = None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(
            f"{kind} '{identifier}' not found" if identifier is not None else f"{kind} not found",
            user_message or f"{kind} not found."
        )

class SessionError(WarboardException):
    """Raised when the owner's credential has expired; unsaved edits are discarded."""
    def __init__(self):
        super().__init__(
            "Owner session expired",
            "Session expired. Please log in again."
        )

class SaveInProgressError(WarboardException):
    """Raised when a save or reset is already running for the same war."""
    def __init__(self, war_index: int, action: str = "save"):
        self.war_index = war_index
        super().__init__(
            f"A {action} for war {war_index + 1} is already in progress",
            f"War {war_index + 1} is still saving. Please wait."
        )

class BatchSaveError(WarboardException):
    """Raised when at least one player's war slot failed to save."""
    def __init__(self, war_index: int, failed_count: int, total: int):
        self.war_index = war_index
        self.failed_count = failed_count
        self.total = total
        super().__init__(
            f"Batch save for war {war_index + 1} failed for {failed_count} of {total} players",
            "Unable to save war data. Some players may have been saved; please retry."
        )

class DatabaseError(WarboardException):
    """Raised when database operations fail."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Database error during {operation}: {details}",
            "Database error occurred. Please try again later."
        )
