from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Any, Callable, Iterable, List

from .memo import MemoCache

__all__ = ["prime", "effective_workers", "all_identities", "failed_identities"]

_logger = logging.getLogger(__name__)


def effective_workers(parallelism: int) -> int:
    """parallelism <= 0 → host CPU count; never below 1."""
    p = int(parallelism or 0)
    if p < 1:
        p = os.cpu_count() or 1
    return max(1, p)


def all_identities(n: int) -> Iterable[int]:
    return range(int(n))


def failed_identities(memo: MemoCache[Any]) -> List[int]:
    # Snapshot under the memo lock before any worker starts.
    return memo.failed_identities()


def prime(
    resolve: Callable[[int], Any],
    identities: Iterable[int],
    parallelism: int,
    *,
    thread_name_prefix: str = "keysort-prime",
) -> int:
    """
    Resolve every identity ahead of sorting; returns how many were submitted.

    - parallelism <= 0 => os.cpu_count() workers; 1 worker runs in the calling thread.
    - Blocks until all submitted resolutions complete.
    - No ordering guarantee between identities; resolve() absorbs key failures,
      so one slow or failing identity never aborts its siblings.
    """
    ids = list(identities)
    if not ids:
        return 0
    workers = min(effective_workers(parallelism), len(ids))
    _logger.debug("priming %d key(s) with %d worker(s)", len(ids), workers)

    if workers <= 1:
        for i in ids:
            resolve(i)
        return len(ids)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=thread_name_prefix) as ex:
        futures: List[Future[Any]] = [ex.submit(resolve, i) for i in ids]
        for fut in futures:
            fut.result()
    return len(ids)
