"""Comparator adapters: len/swap/less over a Sortable, comparing memoized keys.

KeySortable drops key failures after logging them; ErrorAwareKeySortable records
them and exposes errors()/clear_errors()/retry_failed().
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Set, Tuple

import numpy as np

from ..errors import KeyFailure, PrimingError, SortableError
from .memo import MemoCache
from .permutation import PermutationTracker
from .primer import all_identities, failed_identities, prime
from .types import FAILED, KeysortConfig, Sortable

__all__ = [
    "KeySortable",
    "ErrorAwareKeySortable",
    "keysort",
    "primed_keysort",
    "plain_keysort",
]

_logger = logging.getLogger(__name__)


def _check_sortable(wrapped: Any) -> Sortable:
    # runtime_checkable only tests attribute presence; callability is checked here
    missing = [
        name for name in ("__len__", "swap", "key", "less_key")
        if not callable(getattr(wrapped, name, None))
    ]
    if missing or not isinstance(wrapped, Sortable):
        raise SortableError(
            f"{type(wrapped).__name__} is not sortable by key; missing: {', '.join(missing)}"
        )
    return wrapped


class KeySortable:
    """Adapter a len/swap/less sort routine can drive over an expensive-key collection."""

    record_errors = False

    def __init__(self, wrapped: Sortable, *, config: Optional[KeysortConfig] = None) -> None:
        self.wrapped = _check_sortable(wrapped)
        self.config = config or KeysortConfig()
        self._perm = PermutationTracker(len(self.wrapped))
        self._log_level = logging.getLevelName(self.config.failure_log_level.upper())
        if not isinstance(self._log_level, int):
            self._log_level = logging.WARNING
        self._logged: Set[Tuple[int, str]] = set()
        self._logged_lock = threading.Lock()
        self.memo: MemoCache[Any] = MemoCache(
            self.wrapped.key,
            record_errors=self.record_errors,
            on_failure=self._log_failure,
        )

    # -- sort surface -------------------------------------------------------

    def __len__(self) -> int:
        return len(self.wrapped)

    def len(self) -> int:
        return len(self.wrapped)

    def swap(self, i: int, j: int) -> None:
        self._perm.swap(i, j)
        self.wrapped.swap(i, j)

    def less(self, i: int, j: int) -> bool:
        a = self.key_at(i)
        b = self.key_at(j)
        if a is FAILED or b is FAILED:
            return False
        return bool(self.wrapped.less_key(a, b))

    # -- key access ---------------------------------------------------------

    def key_at(self, position: int) -> Any:
        """Key of the element currently at `position`, computed at most once per identity."""
        return self.memo.resolve(self._perm.original(position)).value

    def original(self, position: int) -> int:
        return self._perm.original(position)

    @property
    def permutation(self) -> np.ndarray:
        return self._perm.as_array()

    @property
    def stats(self) -> Dict[str, int]:
        return self.memo.stats

    def prime(self, parallelism: Optional[int] = None) -> "KeySortable":
        """Compute every key ahead of sorting; blocks until all are cached."""
        p = self.config.parallelism if parallelism is None else parallelism
        prime(
            self.memo.resolve,
            all_identities(len(self)),
            p,
            thread_name_prefix=self.config.thread_name_prefix,
        )
        return self

    def _log_failure(self, identity: int, exc: BaseException) -> None:
        tag = (identity, f"{type(exc).__name__}: {exc}")
        with self._logged_lock:
            if tag in self._logged:
                return
            self._logged.add(tag)
        _logger.log(self._log_level, "key computation failed for identity %d: %s", identity, tag[1])


class ErrorAwareKeySortable(KeySortable):
    """
    KeySortable that records key failures per identity.

    Once any failure is recorded, less() returns False for every pair until
    clear_errors() or a clean retry_failed(). Sorted output is unreliable
    whenever errors() is not None.
    """

    record_errors = True

    def less(self, i: int, j: int) -> bool:
        a = self.key_at(i)
        b = self.key_at(j)
        if self.memo.has_errors():
            return False
        if a is FAILED or b is FAILED:
            return False
        return bool(self.wrapped.less_key(a, b))

    def errors(self) -> Optional[PrimingError]:
        errs = self.memo.errors()
        if not errs:
            return None
        return PrimingError(KeyFailure.from_exception(i, e) for i, e in errs.items())

    def clear_errors(self) -> None:
        self.memo.clear_errors()

    def retry_failed(self, parallelism: Optional[int] = None) -> Optional[PrimingError]:
        """Clear errors and recompute keys for the identities that failed before."""
        ids = failed_identities(self.memo)
        self.memo.clear_errors()
        self.memo.forget(ids)
        with self._logged_lock:
            self._logged.clear()
        _logger.debug("retrying %d failed key(s)", len(ids))
        p = self.config.parallelism if parallelism is None else parallelism
        prime(self.memo.resolve, ids, p, thread_name_prefix=self.config.thread_name_prefix)
        return self.errors()


def keysort(wrapped: Sortable, *, config: Optional[KeysortConfig] = None) -> ErrorAwareKeySortable:
    return ErrorAwareKeySortable(wrapped, config=config)


def primed_keysort(
    wrapped: Sortable,
    parallelism: Optional[int] = None,
    *,
    config: Optional[KeysortConfig] = None,
) -> ErrorAwareKeySortable:
    ks = ErrorAwareKeySortable(wrapped, config=config)
    ks.prime(parallelism)
    return ks


def plain_keysort(
    wrapped: Sortable,
    parallelism: Optional[int] = None,
    *,
    primed: bool = False,
    config: Optional[KeysortConfig] = None,
) -> KeySortable:
    ks = KeySortable(wrapped, config=config)
    if primed:
        ks.prime(parallelism)
    return ks
