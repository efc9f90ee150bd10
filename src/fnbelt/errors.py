"""Structured error types for argument validation."""

from __future__ import annotations

from dataclasses import dataclass


class FnBeltError(Exception):
    """Base class for structured fnbelt errors."""


class InvalidArgumentError(FnBeltError):
    """An argument was rejected before any work was done."""


@dataclass(frozen=True)
class NotCallableError(InvalidArgumentError):
    """A callable was required but something else was supplied."""

    where: str
    type_name: str

    @classmethod
    def for_value(cls, value: object, *, where: str) -> "NotCallableError":
        return cls(where=where, type_name=type(value).__name__)

    def __str__(self) -> str:
        return f"{self.where} requires a callable, got {self.type_name}"


def require_callable(value: object, *, where: str) -> None:
    if not callable(value):
        raise NotCallableError.for_value(value, where=where)
