"""
Store Results

Every Record Store operation returns either ``Ok(value)`` or ``Err(kind,
message)`` so the failure path is part of the signature.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class StoreErrorKind(str, Enum):
    """Why a store operation failed"""
    CONFLICT = "conflict"  # unique constraint violation
    FAULT = "fault"  # anything else the database raised


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: StoreErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def is_conflict(self) -> bool:
        return self.kind == StoreErrorKind.CONFLICT


StoreResult = Union[Ok[T], Err]
