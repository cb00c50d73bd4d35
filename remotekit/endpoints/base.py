"""Endpoint contract.

Architecture:
    An endpoint is a pure function pair evaluated against the interface
    that owns it:

    - ``build_request(input, context) -> Request``
    - ``decode_output(response, context) -> Output``

    plus ``make_default_options()``. Endpoints hold no per-call state; the
    client supplies the interface (``root``) and options through context
    objects, so one endpoint instance can serve any number of concurrent
    calls.

Design Decisions:
    - Default options come from the ``options_type`` class attribute:
      ``options_type()`` when declared, ``None`` otherwise.
    - Contexts are frozen dataclasses so transforms cannot mutate the
      values seen by later stages.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from ..core.request import Request

Input = TypeVar("Input")
Output = TypeVar("Output")
Options = TypeVar("Options")


@dataclass(frozen=True)
class BuildRequestContext:
    """What an endpoint sees while building a request."""

    root: Any
    options: Any = None


@dataclass(frozen=True)
class DecodeOutputContext:
    """What an endpoint sees while decoding a response."""

    root: Any
    input: Any
    options: Any
    request: Request


@dataclass(frozen=True)
class TransformContext:
    """What chained build/decode transforms see."""

    root: Any
    input: Any
    options: Any


class Endpoint(ABC, Generic[Input, Output, Options]):
    """A typed description of one remote operation."""

    options_type: ClassVar[type | None] = None

    def make_default_options(self) -> Options:
        """Options used when the caller supplies none."""
        if self.options_type is None:
            return None  # type: ignore[return-value]
        return self.options_type()

    @abstractmethod
    def build_request(self, input: Input, context: BuildRequestContext) -> Request:
        """Build the wire request for ``input``."""

    @abstractmethod
    def decode_output(self, response: Any, context: DecodeOutputContext) -> Output:
        """Decode ``response`` into the endpoint's output."""
