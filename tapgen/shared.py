"""Default generator instances and module-level convenience functions.

Two instances back this module, both created lazily from
``TapgenSettings``:

- ``global_rand()``: one process-wide ``Rand`` over a ``LockedSource``,
  safe to call from any thread. The module-level functions below draw
  from it.
- ``thread_rand()``: one ``Rand`` over an unsynchronized ``RngSource``
  per thread. Each thread starts from the same seed, so every thread sees
  the same sequence.

Prefer an explicit ``Rand`` where the caller controls seeding; these
defaults exist for code that has no generator threaded through it.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, MutableSequence

from .entropy import seed_from_entropy
from .rand import Rand
from .settings import TapgenSettings, load_settings
from .source import LockedSource, RngSource

logger = logging.getLogger(__name__)

_global: Rand | None = None
_global_lock = threading.Lock()
_local = threading.local()
# Bumped by reset() so threads rebuild their instance on next use.
_generation = 0


def _default_seed(settings: TapgenSettings) -> int:
    if settings.seed_from_entropy:
        return seed_from_entropy(fallback=settings.seed)
    return settings.seed


def global_rand() -> Rand:
    """The process-wide shared generator."""
    global _global
    rand = _global
    if rand is not None:
        return rand
    with _global_lock:
        if _global is None:
            seed = _default_seed(load_settings())
            logger.debug("creating global generator with seed %d", seed)
            _global = Rand(LockedSource(RngSource(seed)))
        return _global


def thread_rand() -> Rand:
    """This thread's exclusive generator."""
    rand = getattr(_local, "rand", None)
    if rand is None or _local.generation != _generation:
        seed = _default_seed(load_settings())
        logger.debug(
            "creating generator for thread %s with seed %d",
            threading.current_thread().name,
            seed,
        )
        rand = Rand(RngSource(seed))
        _local.rand = rand
        _local.generation = _generation
    return rand


def reset() -> None:
    """Drop the default instances; the next use rebuilds them."""
    global _global, _generation
    with _global_lock:
        _global = None
        _generation += 1


def seed(seed: int) -> None:
    global_rand().seed(seed)


def int64() -> int:
    return global_rand().int64()


def uint64() -> int:
    return global_rand().uint64()


def int32() -> int:
    return global_rand().int32()


def uint32() -> int:
    return global_rand().uint32()


def int32n(n: int) -> int:
    return global_rand().int32n(n)


def int64n(n: int) -> int:
    return global_rand().int64n(n)


def intn(n: int) -> int:
    return global_rand().intn(n)


def float64() -> float:
    return global_rand().float64()


def float32() -> float:
    return global_rand().float32()


def shuffle(seq: MutableSequence[Any]) -> None:
    global_rand().shuffle(seq)


def perm(n: int) -> list[int]:
    return global_rand().perm(n)


def norm_float64() -> float:
    return global_rand().norm_float64()
