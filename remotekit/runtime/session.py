"""Transport session capability.

Architecture:
    A session turns a request into a response asynchronously. Concrete
    sessions implement ``execute``; the base class tracks every task started
    through ``task()`` in an outstanding-work set so the owner can cancel
    them all on teardown.

Design Decisions:
    - Abstract base class: the client depends only on ``execute`` and the
      outstanding-work bookkeeping.
    - Async context manager: ensures ``close`` runs.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from ..core.request import Request

logger = logging.getLogger(__name__)


class RequestSession(ABC):
    """Abstract transport session."""

    def __init__(self) -> None:
        self._outstanding: set[asyncio.Task[Any]] = set()

    @abstractmethod
    async def execute(self, request: Request) -> Any:
        """Execute ``request`` and return its response.

        Raises:
            RequestError: If the transport fails to satisfy the request.
        """

    def task(self, request: Request) -> asyncio.Task[Any]:
        """Start ``execute(request)`` as a tracked task."""
        task = asyncio.create_task(self.execute(request))
        self._outstanding.add(task)
        task.add_done_callback(self._outstanding.discard)
        return task

    @property
    def outstanding(self) -> frozenset[asyncio.Task[Any]]:
        """Tasks started through ``task()`` that have not finished."""
        return frozenset(self._outstanding)

    def cancel_all(self) -> int:
        """Cancel every outstanding task. Returns how many were canceled."""
        canceled = 0
        for task in list(self._outstanding):
            if not task.done():
                task.cancel()
                canceled += 1
        if canceled:
            logger.debug("Canceled outstanding session work", extra={"count": canceled})
        return canceled

    async def close(self) -> None:
        """Cancel outstanding work and release transport resources."""
        self.cancel_all()

    async def __aenter__(self) -> RequestSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
