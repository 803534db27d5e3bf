"""
Size estimation for cached values.

The estimate is a heuristic used only to compare entries against the
configured memory ceiling. It counts the UTF-8 bytes of a compact JSON
encoding of the value plus the UTF-8 bytes of the key. Shared references,
interpreter object overhead and nested container headers are not
accounted for.
"""

import json
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Used when a value cannot be measured at all
FALLBACK_SIZE_ESTIMATE = 1024

SizeEstimator = Callable[[str, Any], int]


def estimate_size(key: str, value: Any) -> int:
    """
    Estimate the byte cost of storing value under key.

    Values that JSON cannot encode (sets, arbitrary objects, circular
    structures) are measured by their repr() instead. If that fails too,
    FALLBACK_SIZE_ESTIMATE is returned.

    Returns:
        A positive byte estimate
    """
    key_size = len(key.encode("utf-8"))

    try:
        text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        try:
            text = repr(value)
        except Exception as e:
            logger.warning(f"Cannot measure value for key {key!r}: {e}")
            return key_size + FALLBACK_SIZE_ESTIMATE

    return max(1, key_size + len(text.encode("utf-8", errors="replace")))


def safe_estimate(estimator: SizeEstimator, key: str, value: Any) -> int:
    """
    Run a size estimator, never failing.

    Estimators that raise or return a non-positive or non-integer result
    are replaced by FALLBACK_SIZE_ESTIMATE for this value.
    """
    try:
        size = estimator(key, value)
    except Exception as e:
        logger.warning(f"Size estimator failed for key {key!r}: {e}")
        return FALLBACK_SIZE_ESTIMATE

    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        logger.warning(f"Size estimator returned {size!r} for key {key!r}")
        return FALLBACK_SIZE_ESTIMATE
    return size
