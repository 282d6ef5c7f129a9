"""Uniform success-or-error result returned by the service facade."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a success with an optional payload or an error with a message."""

    ok: bool
    data: Optional[T] = None
    message: Optional[str] = None
    kind: Optional[str] = None  # failure kind, e.g. "validation", "storage"

    @classmethod
    def success(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(ok=True, data=data)

    @classmethod
    def error(cls, message: str, kind: str = "internal") -> "Result[T]":
        return cls(ok=False, message=message, kind=kind)
