"""Result values for provider fetches."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from fund_monitor.domain.models.enums import FetchErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class FetchError:
    """Describes a failed fetch."""

    kind: FetchErrorKind
    message: str
    status_code: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of a provider fetch: either a value or a FetchError.

    Provider unavailability is routine, so it travels as a value and is
    logged at the fetcher boundary instead of being raised.
    """

    value: Optional[T] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        kind: FetchErrorKind,
        message: str,
        status_code: Optional[int] = None,
    ) -> "FetchResult[T]":
        return cls(error=FetchError(kind=kind, message=message, status_code=status_code))
