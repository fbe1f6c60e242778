from __future__ import annotations

import logging
import threading

import numpy as np

logger = logging.getLogger(__name__)

_shared_engine: np.random.Generator | None = None
_shared_lock = threading.RLock()


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return a Mersenne Twister backed generator seeded with ``seed``."""

    return np.random.Generator(np.random.MT19937(seed))


def shared_engine(seed: int) -> np.random.Generator:
    """Return the process-wide engine, creating it from ``seed`` on first use.

    Only the seed of the very first call is used. Every later call returns the
    same generator whatever seed it passes, so draws depend on call order
    across the process. Prefer passing an explicit generator from
    :func:`make_rng` where independent reproducible streams are needed.
    """

    global _shared_engine
    with _shared_lock:
        if _shared_engine is None:
            logger.debug("creating shared direction engine with seed %d", seed)
            _shared_engine = make_rng(seed)
        return _shared_engine


def shared_lock():
    """Lock serializing access to the shared engine (re-entrant)."""

    return _shared_lock


def _reset_shared_engine() -> None:
    # test hook: forget the shared engine so the next call seeds a fresh one
    global _shared_engine
    with _shared_lock:
        _shared_engine = None
