"""Value coders used by durable caches."""

from __future__ import annotations

import pickle
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

import pydantic_core
from pydantic import BaseModel, TypeAdapter


@runtime_checkable
class Coder(Protocol):
    """Turns values into bytes and back."""

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes, type_: Any = None) -> Any: ...


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


class JSONCoder:
    """JSON coder backed by pydantic.

    Encodes pydantic models, dataclasses and builtins; decodes into any type
    pydantic can validate (plain JSON values when no type is given).
    """

    def encode(self, value: Any) -> bytes:
        if isinstance(value, BaseModel):
            # honors the model's own JSON config (base64 bytes)
            return value.model_dump_json().encode("utf-8")
        return pydantic_core.to_json(value)

    def decode(self, data: bytes, type_: Any = None) -> Any:
        if type_ is None or type_ is Any:
            return pydantic_core.from_json(data)
        try:
            adapter = _adapter(type_)
        except TypeError:
            # unhashable generic aliases
            adapter = TypeAdapter(type_)
        return adapter.validate_json(data)


class PickleCoder:
    """Binary coder for arbitrary Python objects.

    Only use with caches whose storage is trusted.
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self.protocol = protocol

    def encode(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=self.protocol)

    def decode(self, data: bytes, type_: Any = None) -> Any:
        value = pickle.loads(data)
        if type_ is not None and type_ is not Any and isinstance(type_, type):
            if not isinstance(value, type_):
                raise TypeError(f"Cached value is {type(value).__name__}, expected {type_.__name__}")
        return value
