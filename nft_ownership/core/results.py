"""
Stage results for the resolution pipeline.

Each stage returns either Ok(value) or Degraded(reason) so that every
fallback is an explicit branch at the call site.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Degraded:
    reason: str
    error: Optional[BaseException] = None


StageResult = Union[Ok[T], Degraded]
