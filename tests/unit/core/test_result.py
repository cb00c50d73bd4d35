"""Unit tests for TaskResult."""

from __future__ import annotations

import pytest

from remotekit.core import APIError, TaskCanceledError, TaskResult, TaskStatus


class TestTaskResult:
    """Test TaskResult states and transformations."""

    def test_success(self):
        result = TaskResult.success(5)
        assert result.status is TaskStatus.SUCCESS
        assert result.is_success
        assert result.get() == 5

    def test_failure_get_raises_error(self):
        error = APIError("boom")
        result = TaskResult.failure(error)
        assert result.is_error
        with pytest.raises(APIError) as exc_info:
            result.get()
        assert exc_info.value is error

    def test_canceled_is_not_an_error(self):
        result = TaskResult.canceled()
        assert result.is_canceled
        assert not result.is_error
        assert result.error is None
        with pytest.raises(TaskCanceledError):
            result.get()

    def test_map_transforms_success(self):
        assert TaskResult.success(2).map(lambda v: v * 10).value == 20

    def test_map_exception_becomes_failure(self):
        result = TaskResult.success("x").map(int)
        assert result.is_error
        assert isinstance(result.error, ValueError)

    def test_map_skips_non_success(self):
        canceled = TaskResult.canceled()
        assert canceled.map(lambda v: v + 1) is canceled

    def test_map_error(self):
        result = TaskResult.failure(ValueError("bad")).map_error(APIError.runtime)
        assert isinstance(result.error, APIError)
        assert isinstance(result.error.underlying, ValueError)

    def test_immutable(self):
        result = TaskResult.success(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]
