"""Terminal task results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from .exceptions import TaskCanceledError

T = TypeVar("T")
U = TypeVar("U")


class TaskStatus(str, Enum):
    """Terminal status of a task."""

    SUCCESS = "success"
    ERROR = "error"
    CANCELED = "canceled"


@dataclass(frozen=True)
class TaskResult(Generic[T]):
    """Immutable snapshot of how a task ended.

    Cancellation is a status of its own, distinct from failure.
    """

    status: TaskStatus
    value: T | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls, value: T) -> TaskResult[T]:
        return cls(TaskStatus.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: BaseException) -> TaskResult[Any]:
        return cls(TaskStatus.ERROR, error=error)

    @classmethod
    def canceled(cls) -> TaskResult[Any]:
        return cls(TaskStatus.CANCELED)

    @property
    def is_success(self) -> bool:
        return self.status is TaskStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is TaskStatus.ERROR

    @property
    def is_canceled(self) -> bool:
        return self.status is TaskStatus.CANCELED

    def get(self) -> T:
        """Return the value, raising the error (or ``TaskCanceledError``)."""
        if self.status is TaskStatus.SUCCESS:
            return self.value  # type: ignore[return-value]
        if self.status is TaskStatus.CANCELED:
            raise TaskCanceledError("Task was canceled")
        assert self.error is not None
        raise self.error

    def map(self, transform: Callable[[T], U]) -> TaskResult[U]:
        """Transform a success value; exceptions become failures."""
        if self.status is not TaskStatus.SUCCESS:
            return self  # type: ignore[return-value]
        try:
            return TaskResult.success(transform(self.value))  # type: ignore[arg-type]
        except Exception as e:
            return TaskResult.failure(e)

    def map_error(self, transform: Callable[[BaseException], BaseException]) -> TaskResult[T]:
        if self.status is not TaskStatus.ERROR or self.error is None:
            return self
        return TaskResult.failure(transform(self.error))
