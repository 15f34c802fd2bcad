"""
Task outcomes for the map/reduce executors.

Every hard failure is a TaskError subclass carried on the TaskResult
returned to the caller. An empty map output is not a failure: it is a
completed result flagged with ``empty_output``.
"""

from enum import Enum
from typing import List, Optional


class TaskState(Enum):
    """Lifecycle of a single executor call."""
    IDLE = "idle"
    READING = "reading"          # Reading input / intermediate files
    PROCESSING = "processing"    # Running the user callback, partitioning, grouping
    WRITING = "writing"          # Writing intermediate / output files
    COMPLETED = "completed"
    ABORTED = "aborted"


class TaskError(Exception):
    """Base class for errors that abort a task."""

    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.path = path
        self.cause = cause


class InputReadError(TaskError):
    """The map input file could not be read."""


class IntermediateOpenError(TaskError):
    """An intermediate file could not be opened."""


class IntermediateMissingError(IntermediateOpenError):
    """An expected intermediate file does not exist."""


class IntermediateEncodeError(TaskError):
    """A map output record could not be encoded into its intermediate file."""


class IntermediateDecodeError(TaskError):
    """An intermediate file holds a malformed record."""


class OutputOpenError(TaskError):
    """The reduce output file could not be opened."""


class OutputEncodeError(TaskError):
    """A reduce output record could not be encoded."""


class TaskResult:
    """Explicit outcome of one map or reduce task."""

    def __init__(self, task_type: str, job_name: str, task_index: int):
        self.task_type = task_type  # map, reduce
        self.job_name = job_name
        self.task_index = task_index
        self.state = TaskState.IDLE
        self.failed_in: Optional[TaskState] = None
        self.output_files: List[str] = []
        self.records_written = 0
        self.error: Optional[TaskError] = None
        self.empty_output = False

    @property
    def label(self) -> str:
        return f"{self.task_type} task {self.job_name}#{self.task_index}"

    @property
    def success(self) -> bool:
        return self.state == TaskState.COMPLETED

    def raise_for_error(self):
        """Re-raise the stored error, if the task aborted."""
        if self.error is not None:
            raise self.error

    def to_dict(self):
        return {
            'task_type': self.task_type,
            'job_name': self.job_name,
            'task_index': self.task_index,
            'state': self.state.value,
            'failed_in': self.failed_in.value if self.failed_in else None,
            'output_files': list(self.output_files),
            'records_written': self.records_written,
            'error': str(self.error) if self.error else None,
            'empty_output': self.empty_output,
        }

    def __repr__(self):
        return (f"TaskResult({self.task_type} {self.job_name}#{self.task_index}, "
                f"state={self.state.value}, files={len(self.output_files)})")
