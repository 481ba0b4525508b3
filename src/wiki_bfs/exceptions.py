"""
Custom exceptions for the BFS pipeline.
"""

class WikiBFSException(Exception):
    """Base exception for the application."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class RecordCorruptionError(WikiBFSException):
    """Raised when a record field is present but cannot be parsed."""
    pass

class TaskFailedError(WikiBFSException):
    """Raised when a map or reduce task keeps failing after every allowed attempt."""
    def __init__(self, job_name: str, task: str, attempts: int, cause: BaseException):
        self.job_name = job_name
        self.task = task
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"{job_name}: {task} failed after {attempts} attempts: {cause}")

    def __reduce__(self):
        # Raised inside worker processes, so it has to survive pickling
        return (self.__class__, (self.job_name, self.task, self.attempts, self.cause))

class InputNotFoundError(WikiBFSException):
    """Raised when the raw page collection does not exist."""
    pass
