"""Collector contract: run a blocking metric read off-loop under a timeout.

A collector is a plain callable returning a snapshot. `run_collector` is the
cache boundary for failures: exceptions and timeouts come back as an
`Unavailable` sentinel with ``ok=False`` and never propagate.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from rainfetch.utils.async_utils import run_blocking

from .snapshots import CacheCategory, Snapshot, Unavailable

logger = logging.getLogger(__name__)

Collector = Callable[[], Snapshot]

DEFAULT_COLLECTOR_TIMEOUT_S = 2.5
COLLECTOR_TIMEOUTS_S: Mapping[CacheCategory, float] = {
    "system": DEFAULT_COLLECTOR_TIMEOUT_S,
    "network": DEFAULT_COLLECTOR_TIMEOUT_S,
    "hardware": DEFAULT_COLLECTOR_TIMEOUT_S,
    "process": DEFAULT_COLLECTOR_TIMEOUT_S,
    "weather": 3.0,
}


class CollectionError(Exception):
    """A collector could not produce a snapshot."""


@dataclass(frozen=True)
class CollectionOutcome:
    snapshot: Snapshot
    ok: bool
    elapsed_s: float = 0.0


async def run_collector(
    category: CacheCategory,
    collector: Collector,
    *,
    timeout_s: float | None = None,
) -> CollectionOutcome:
    """Run ``collector`` on the IO executor, bounded by ``timeout_s``.

    A timed-out collector keeps running in its worker thread until it returns;
    its result is discarded.
    """
    budget_s = timeout_s if timeout_s is not None else COLLECTOR_TIMEOUTS_S[category]
    started = time.monotonic()
    try:
        snapshot = await asyncio.wait_for(run_blocking(collector), timeout=budget_s)
    except asyncio.TimeoutError:
        elapsed = time.monotonic() - started
        logger.warning(
            "Collector '%s' timed out after %.1fs",
            category,
            budget_s,
            extra={"event": "collector_timeout", "category": category},
        )
        return CollectionOutcome(
            Unavailable(f"timed out after {budget_s:g}s"), ok=False, elapsed_s=elapsed
        )
    except CollectionError as exc:
        elapsed = time.monotonic() - started
        logger.warning(
            "Collector '%s' could not collect: %s",
            category,
            exc,
            extra={"event": "collector_unavailable", "category": category},
        )
        reason = str(exc) or type(exc).__name__
        return CollectionOutcome(Unavailable(reason), ok=False, elapsed_s=elapsed)
    except Exception as exc:
        elapsed = time.monotonic() - started
        logger.exception(
            "Collector '%s' failed: %s",
            category,
            exc,
            extra={
                "event": "collector_failed",
                "category": category,
                "error_type": type(exc).__name__,
            },
        )
        reason = str(exc) or type(exc).__name__
        return CollectionOutcome(Unavailable(reason), ok=False, elapsed_s=elapsed)
    elapsed = time.monotonic() - started
    if isinstance(snapshot, Unavailable):
        return CollectionOutcome(snapshot, ok=False, elapsed_s=elapsed)
    return CollectionOutcome(snapshot, ok=True, elapsed_s=elapsed)
