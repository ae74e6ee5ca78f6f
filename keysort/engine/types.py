from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Protocol, TypeVar, runtime_checkable

__all__ = ["Sortable", "KeysortConfig", "KeyResult", "FAILED", "K"]

K = TypeVar("K")  # ordering key produced by Sortable.key


@runtime_checkable
class Sortable(Protocol):
    """Capability set a collection must provide to be sorted by key.

    Positions passed to swap() are current positions; the identity passed to
    key() is the element's original index, fixed when the adapter was built.
    key() signals failure by raising.
    """

    def __len__(self) -> int: ...

    def swap(self, i: int, j: int) -> None: ...

    def key(self, identity: int) -> Any: ...

    def less_key(self, a: Any, b: Any) -> bool: ...


class _Failed:
    """Sentinel cached in place of a key whose computation raised."""

    _instance: Optional["_Failed"] = None

    def __new__(cls) -> "_Failed":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "FAILED"

    def __bool__(self) -> bool:
        return False


FAILED = _Failed()


@dataclass(frozen=True)
class KeyResult:
    identity: int
    value: Any
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not FAILED


@dataclass(frozen=True)
class KeysortConfig:
    parallelism: int = 0  # <= 0 means os.cpu_count()
    thread_name_prefix: str = "keysort-prime"
    failure_log_level: str = "WARNING"
