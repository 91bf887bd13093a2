from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from functools import total_ordering
from typing import Any, Iterable, List, Optional

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(IntEnum):
    # declaration order is the cross-kind sort order
    NULL = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    STR = 4
    SET = 5


@total_ordering
@dataclass(slots=True, eq=True)
class Value:
    """Ordered by kind, then payload; ordering a NaN float raises ValueError."""

    kind: ValueKind
    data: Any = None

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL)

    @classmethod
    def boolean(cls, value: bool) -> Value:
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def integer(cls, value: int) -> Value:
        number = int(value)
        if not INT64_MIN <= number <= INT64_MAX:
            raise ValueError(f"Integer {number} does not fit in 64 bits")
        return cls(ValueKind.INT, number)

    @classmethod
    def floating(cls, value: float) -> Value:
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def string(cls, value: str) -> Value:
        return cls(ValueKind.STR, value)

    @classmethod
    def set_of(cls, pairs: Iterable[KeyValuePair] = ()) -> Value:
        return cls(ValueKind.SET, list(pairs))

    @classmethod
    def from_native(cls, obj: Any) -> Value:
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.floating(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (dict, list, tuple)):
            return cls.set_of(pairs_from_native(obj))
        raise TypeError(f"Cannot convert {type(obj).__name__} to a config value")

    @property
    def is_set(self) -> bool:
        return self.kind == ValueKind.SET

    @property
    def pairs(self) -> List[KeyValuePair]:
        return self.data if self.kind == ValueKind.SET else []

    def get(self, key: str, default: Optional[Value] = None) -> Optional[Value]:
        for pair in self.pairs:
            if pair.key == key:
                return pair.value
        return default

    def to_native(self) -> Any:
        if self.kind == ValueKind.SET:
            return pairs_to_native(self.data)
        return self.data

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind != other.kind:
            return self.kind < other.kind
        if self.kind == ValueKind.FLOAT and (math.isnan(self.data) or math.isnan(other.data)):
            raise ValueError("NaN floats have no ordering")
        if self.kind == ValueKind.NULL:
            return False
        return self.data < other.data


@total_ordering
@dataclass(slots=True, eq=True)
class KeyValuePair:
    """One member of a set; ``key`` is ``None`` for positional members."""

    key: Optional[str]
    value: Value = field(default_factory=Value.null)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, KeyValuePair):
            return NotImplemented
        if self.key != other.key:
            # unkeyed members sort before keyed ones
            if self.key is None or other.key is None:
                return self.key is None
            return self.key < other.key
        return self.value < other.value


def pairs_from_native(obj: Any) -> List[KeyValuePair]:
    if isinstance(obj, dict):
        pairs = []
        for key, value in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"Config keys must be strings, got {type(key).__name__}")
            pairs.append(KeyValuePair(key, Value.from_native(value)))
        return pairs
    return [KeyValuePair(None, Value.from_native(value)) for value in obj]


def pairs_to_native(pairs: List[KeyValuePair]) -> Any:
    # unkeyed members of a keyed set take the next integer index, as in PHP
    if all(pair.key is None for pair in pairs):
        return [pair.value.to_native() for pair in pairs]
    result: dict[Any, Any] = {}
    next_index = 0
    for pair in pairs:
        if pair.key is None:
            result[next_index] = pair.value.to_native()
            next_index += 1
        else:
            result[pair.key] = pair.value.to_native()
    return result
