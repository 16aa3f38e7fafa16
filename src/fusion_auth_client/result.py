"""
Success/Failure result values delivered by every request.
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import FusionAuthError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Terminal result carrying the decoded value."""
    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def get(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Terminal result carrying a structured error."""
    error: FusionAuthError

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def get(self):
        """Raise the carried error."""
        raise self.error


Result = Union[Success[T], Failure]
