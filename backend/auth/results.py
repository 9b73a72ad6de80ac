from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from backend.auth.errors import AuthError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AuthError


Result = Union[Ok[T], Err]
