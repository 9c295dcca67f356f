"""
Parallel optimization of independent requests.

Each request is CPU-bound and shares nothing with the others, so requests
are spread over worker processes. Results come back in input order.
"""

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .api import optimize_request
from .core.settings import EngineConfig

logger = logging.getLogger(__name__)


def optimize_many(
    requests: Sequence[Mapping[str, Any]],
    max_workers: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> List[Dict[str, Any]]:
    """
    Optimize several requests in parallel.

    Args:
        requests: Request payloads in the camelCase contract
        max_workers: Worker processes (None lets the executor decide; 1 runs
            in the calling process)
        config: Engine configuration shared by every request

    Returns:
        One result dict per request, in input order
    """
    if not requests:
        return []
    if max_workers == 1 or len(requests) == 1:
        return [optimize_request(r, config) for r in requests]

    results: List[Optional[Dict[str, Any]]] = [None] * len(requests)
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(optimize_request, r, config): i
            for i, r in enumerate(requests)
        }
        for future in as_completed(futures):
            i = futures[future]
            results[i] = future.result()
            logger.debug("Request %d/%d done", i + 1, len(requests))
    return results  # type: ignore[return-value]
