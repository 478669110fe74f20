"""Typed success/failure container used for non-raising checks.

The workflow answers "does this step pass its gate?" without raising: the
outcome comes back as ``Ok(step)`` or ``Err(failures)`` and callers decide
whether to render the failures or go ahead. Only the mutating transitions
turn an ``Err`` into an exception.

Each variant implements the full interface itself, so no method needs to
inspect which variant it is running on.

Example
-------
>>> from reviewkit.core.result import ok, err, Result
>>> def next_step(step: int, total: int) -> Result[int, str]:
...     return ok(step + 1) if step < total else err("last step")
>>> next_step(2, 6).map(lambda s: s * 10).unwrap()
30
>>> next_step(6, 6).unwrap_err()
'last step'
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


class Result(Generic[T, E]):
    """Either :class:`Ok` carrying a ``T`` or :class:`Err` carrying an ``E``."""

    def is_ok(self) -> bool:
        raise NotImplementedError

    def is_err(self) -> bool:
        return not self.is_ok()

    def unwrap(self, default: T | None = None) -> T:
        """Return the success value; on ``Err`` return ``default`` or raise ``RuntimeError``."""
        raise NotImplementedError

    def unwrap_err(self) -> E:
        """Return the error payload; raise ``RuntimeError`` on ``Ok``."""
        raise NotImplementedError

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        """Transform the success value, leaving an error untouched."""
        raise NotImplementedError

    def map_err(self, fn: Callable[[E], F]) -> Result[T, F]:
        """Transform the error payload, leaving a success untouched."""
        raise NotImplementedError


@dataclass(frozen=True)
class Ok(Result[T, E]):
    """Success variant."""

    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self, default: T | None = None) -> T:
        return self.value

    def unwrap_err(self) -> E:
        raise RuntimeError(f"unwrap_err() called on {self!r}")

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[E], F]) -> Result[T, F]:
        return Ok(self.value)


@dataclass(frozen=True)
class Err(Result[T, E]):
    """Failure variant."""

    error: E

    def is_ok(self) -> bool:
        return False

    def unwrap(self, default: T | None = None) -> T:
        if default is None:
            raise RuntimeError(f"unwrap() called on {self!r}")
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        return Err(self.error)

    def map_err(self, fn: Callable[[E], F]) -> Result[T, F]:
        return Err(fn(self.error))


def ok(value: T) -> Result[T, E]:
    """Build an :class:`Ok` typed as the ``Result`` base."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Build an :class:`Err` typed as the ``Result`` base."""
    return Err(error)


__all__ = ["Result", "Ok", "Err", "ok", "err"]
