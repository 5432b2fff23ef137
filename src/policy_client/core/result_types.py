# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Result types for error handling without exceptions."""

from collections.abc import Callable
from typing import Any, Generic, NoReturn, TypeVar, Union

from attrs import field, frozen
from beartype import beartype

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@frozen
class Ok(Generic[T]):
    """Success result wrapper."""

    value: T = field()

    @beartype
    def is_ok(self) -> bool:
        """Check if result is Ok."""
        return True

    @beartype
    def is_err(self) -> bool:
        """Check if result is Err."""
        return False

    @beartype
    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    @beartype
    def unwrap_or(self, default: Any) -> T:
        """Get the success value."""
        return self.value

    @beartype
    def unwrap_err(self) -> NoReturn:
        """Raise ValueError as this is Ok."""
        raise ValueError("Called unwrap_err on Ok value")

    @beartype
    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(func(self.value))

    @beartype
    def map_err(self, func: Callable[[Any], Any]) -> "Ok[T]":
        """No-op for Ok values."""
        return self

    @beartype
    def and_then(self, func: Callable[[T], Any]) -> Any:
        """Chain operations that return Results."""
        return func(self.value)


@frozen
class Err(Generic[E]):
    """Error result wrapper."""

    error: E = field()

    @beartype
    def is_ok(self) -> bool:
        """Check if result is Ok."""
        return False

    @beartype
    def is_err(self) -> bool:
        """Check if result is Err."""
        return True

    @beartype
    def unwrap(self) -> NoReturn:
        """Raise ValueError as this is Err."""
        raise ValueError(f"Called unwrap on Err value: {self.error}")

    @beartype
    def unwrap_or(self, default: Any) -> Any:
        """Return default value."""
        return default

    @beartype
    def unwrap_err(self) -> E:
        """Get the error value."""
        return self.error

    @beartype
    def map(self, func: Callable[[Any], Any]) -> "Err[E]":
        """No-op for Err values."""
        return self

    @beartype
    def map_err(self, func: Callable[[E], U]) -> "Err[U]":
        """Transform the error value."""
        return Err(func(self.error))

    @beartype
    def and_then(self, func: Callable[[Any], Any]) -> "Err[E]":
        """No-op for Err values."""
        return self


# Result[T, E] is a plain union so runtime type checks see Ok/Err directly.
Result = Union[Ok[T], Err[E]]
