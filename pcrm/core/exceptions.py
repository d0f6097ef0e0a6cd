"""
FILE: pcrm/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - PcrmError (base exception)
  - TaskNotFoundError
  - NextStepNotFoundError
  - InvalidInputError
  - ParseFailure
  - PersistenceError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from PcrmError for easy catching
  - Exceptions include context (IDs, sources) for helpful error messages
  - Service layer raises these, UI layers catch and display
  - ParseFailure is also returned as a value by the load path
"""


class PcrmError(Exception):
    """Base exception for all pcrm errors."""
    pass


class TaskNotFoundError(PcrmError):
    """Task with given ID (or ID prefix) doesn't exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class NextStepNotFoundError(PcrmError):
    """Next step with given ID doesn't exist on its task."""

    def __init__(self, task_id: str, step_id: str):
        self.task_id = task_id
        self.step_id = step_id
        super().__init__(f"Next step {step_id} not found on task {task_id}")


class InvalidInputError(PcrmError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class ParseFailure(PcrmError):
    """Task JSON (persisted record or import file) could not be parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not parse tasks from {source}: {reason}")


class PersistenceError(PcrmError):
    """Writing the task list to local storage failed."""

    def __init__(self, message: str):
        super().__init__(message)
