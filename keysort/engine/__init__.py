"""Engine package: permutation tracking, key memo, primer and comparator adapters."""

from __future__ import annotations

from .adapter import ErrorAwareKeySortable, KeySortable, keysort, plain_keysort, primed_keysort
from .memo import MemoCache
from .permutation import PermutationTracker
from .primer import all_identities, effective_workers, failed_identities, prime
from .types import FAILED, KeyResult, KeysortConfig, Sortable

__all__ = [
    "FAILED",
    "ErrorAwareKeySortable",
    "KeyResult",
    "KeySortable",
    "KeysortConfig",
    "MemoCache",
    "PermutationTracker",
    "Sortable",
    "all_identities",
    "effective_workers",
    "failed_identities",
    "keysort",
    "plain_keysort",
    "prime",
    "primed_keysort",
]
