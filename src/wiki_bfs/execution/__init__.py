# Execution substrate the BFS jobs run on

from .backend import ExecutionBackend
from .job import JobSpec, TaskOutput, identity_mapper, identity_reducer
from .local import LocalBackend

__all__ = [
    "ExecutionBackend",
    "JobSpec",
    "TaskOutput",
    "identity_mapper",
    "identity_reducer",
    "LocalBackend",
]
