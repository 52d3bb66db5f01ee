from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from .exceptions import APIError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: APIError

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Success[T], Failure]
ResultCallback = Callable[[Result[T]], None]
