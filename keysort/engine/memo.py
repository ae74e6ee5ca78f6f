from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, Iterable, List, Optional, Tuple

from .types import FAILED, K, KeyResult

__all__ = ["MemoCache"]


class MemoCache(Generic[K]):
    """
    Memo of original identity → key, with an optional identity → error store.

    Semantics:
      • resolve(i) returns the cached entry when present; key_fn is not called again.
      • On a miss, key_fn(i) runs WITHOUT holding the lock, so other identities
        can resolve while one slow computation is in flight.
      • The result is written back under the lock (last writer wins). Two threads
        missing on the same identity may both call key_fn; the cache does not
        single-flight first access.
      • A raising key_fn caches FAILED. With record_errors=True the exception is
        kept until the identity resolves cleanly or clear_errors() is called.
      • One lock guards both maps and is held only for dict reads/writes.
    """

    def __init__(
        self,
        key_fn: Callable[[int], K],
        *,
        record_errors: bool = True,
        on_failure: Optional[Callable[[int, BaseException], None]] = None,
    ) -> None:
        self._key_fn = key_fn
        self.record_errors = bool(record_errors)
        self.on_failure = on_failure
        self._lock = threading.Lock()
        self._memo: Dict[int, K] = {}
        self._errors: Dict[int, BaseException] = {}
        self._hits = 0
        self._misses = 0
        self._computed = 0
        self._failed = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._memo)

    def __contains__(self, identity: int) -> bool:
        with self._lock:
            return identity in self._memo

    # -- Core operations ----------------------------------------------------

    def resolve(self, identity: int) -> KeyResult:
        identity = int(identity)
        with self._lock:
            if identity in self._memo:
                self._hits += 1
                return KeyResult(identity, self._memo[identity], self._errors.get(identity))
            self._misses += 1

        error: Optional[BaseException] = None
        try:
            value = self._key_fn(identity)
        except Exception as e:  # noqa: BLE001
            value = FAILED
            error = e

        with self._lock:
            self._computed += 1
            self._memo[identity] = value
            if error is None:
                self._errors.pop(identity, None)
            else:
                self._failed += 1
                if self.record_errors:
                    self._errors[identity] = error

        if error is not None and self.on_failure is not None:
            self.on_failure(identity, error)
        return KeyResult(identity, value, error)

    def lookup(self, identity: int) -> Tuple[bool, Optional[K]]:
        """Return (hit, value) without computing on a miss."""
        with self._lock:
            if identity in self._memo:
                return True, self._memo[identity]
            return False, None

    def forget(self, identities: Iterable[int]) -> int:
        """Drop cached keys (and errors) so the next resolve recomputes. Returns count dropped."""
        n = 0
        with self._lock:
            for i in map(int, identities):
                if i in self._memo or i in self._errors:
                    n += 1
                self._memo.pop(i, None)
                self._errors.pop(i, None)
        return n

    # -- Error store --------------------------------------------------------

    def errors(self) -> Dict[int, BaseException]:
        """Snapshot of currently recorded failures."""
        with self._lock:
            return dict(self._errors)

    def has_errors(self) -> bool:
        with self._lock:
            return bool(self._errors)

    def clear_errors(self) -> int:
        """Remove every recorded error; cached keys (FAILED included) stay."""
        with self._lock:
            n = len(self._errors)
            self._errors.clear()
            return n

    def failed_identities(self) -> List[int]:
        """Identities with a recorded error or a cached FAILED sentinel, ascending."""
        with self._lock:
            out = set(self._errors)
            out.update(i for i, v in self._memo.items() if v is FAILED)
        return sorted(out)

    @property
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "hits": int(self._hits),
                "misses": int(self._misses),
                "computed": int(self._computed),
                "failed": int(self._failed),
                "size": len(self._memo),
                "errors": len(self._errors),
            }
