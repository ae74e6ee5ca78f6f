"""Typed error taxonomy (public).

Only `keysort` and `keysort.errors` are public import roots. Everything else is internal.
This module exposes the caller-facing error classes and a small helper `format_error`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

__all__ = [
    "KeysortError",
    "ConfigError",
    "SortableError",
    "KeyFailure",
    "PrimingError",
    "format_error",
]


class KeysortError(Exception):
    """Base class for all typed, caller-facing errors in keysort."""
    pass


class ConfigError(KeysortError):
    """Configuration invalid, unknown keys, wrong version, etc."""
    pass


class SortableError(KeysortError):
    """Wrapped collection does not provide len/swap/key/less_key."""
    pass


@dataclass(frozen=True)
class KeyFailure:
    identity: int
    exc_type: str
    message: str
    exc: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, identity: int, exc: BaseException) -> "KeyFailure":
        return cls(int(identity), type(exc).__name__, str(exc), exc)


class PrimingError(KeysortError):
    """Aggregate over every identity whose key function currently has a recorded failure.

    Failures are ordered by identity so the message is stable across runs.
    """

    def __init__(self, failures: Iterable[KeyFailure]):
        self.errors: List[KeyFailure] = sorted(failures, key=lambda f: f.identity)
        msg = "; ".join(f"[{f.identity}] {f.exc_type}: {f.message}" for f in self.errors)
        super().__init__(f"{len(self.errors)} key computation(s) failed: {msg}")

    @property
    def identities(self) -> List[int]:
        return [f.identity for f in self.errors]

    def __len__(self) -> int:
        return len(self.errors)


def format_error(e: BaseException) -> str:
    """Return a short, uniform caller-facing message like 'ConfigError: detail'."""
    name = e.__class__.__name__
    msg = str(e).strip()
    return f"{name}: {msg}" if msg else name


# Keep star-export order deterministic for tests and tooling
__all__ = sorted(__all__)
