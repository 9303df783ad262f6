"""Exceptions raised by the engine for structurally invalid operations."""


class StrengthEngineError(Exception):
    """Base exception for engine errors."""
    pass


class NotFoundError(StrengthEngineError, LookupError):
    """Raised when a referenced record does not exist."""
    pass


class ProgramNotFoundError(NotFoundError):
    """Raised when a program id does not exist."""

    def __init__(self, program_id: int):
        super().__init__(f"Program {program_id} not found")
        self.program_id = program_id


class LiftNotFoundError(NotFoundError):
    """Raised when a program has no lift for the given exercise."""

    def __init__(self, program_id: int, exercise_id: str):
        super().__init__(f"Program {program_id} has no lift '{exercise_id}'")
        self.program_id = program_id
        self.exercise_id = exercise_id


class ExerciseNotFoundError(NotFoundError):
    """Raised when an exercise id is not in the catalog."""

    def __init__(self, exercise_id: str, valid: list[str] | None = None):
        message = f"Unknown exercise '{exercise_id}'"
        if valid:
            message += f". Valid IDs: {', '.join(valid)}"
        super().__init__(message)
        self.exercise_id = exercise_id


class ProfileNotFoundError(NotFoundError):
    """Raised when no profile is stored for a user."""

    def __init__(self, user_id: int):
        super().__init__(f"Profile for user {user_id} not found. Run 'init' first.")
        self.user_id = user_id


class UnsupportedProgramTypeError(StrengthEngineError, ValueError):
    """Raised when a program type has no progression handler."""

    def __init__(self, program_type: object):
        super().__init__(f"Unsupported program type: {program_type!r}")
        self.program_type = program_type
