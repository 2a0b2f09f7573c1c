from __future__ import annotations

import copy
from abc import ABC
from collections.abc import Mapping
from typing import Any, TypeVar

Record = Mapping[str, Any]

T = TypeVar("T")


class Duplicable(ABC):
    """
    Capability for values that carry mutable state and must be copied per import.

    The default implementation is a deep copy; override when only part of the
    state needs to be independent (e.g. a live HTTP client that can be shared).
    """

    def duplicate(self: T) -> T:
        return copy.deepcopy(self)


def duplicate(value: T) -> T:
    if isinstance(value, Duplicable):
        return value.duplicate()
    return copy.deepcopy(value)
