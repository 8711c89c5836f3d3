"""Identity-keyed memoization for the row builders.

The builders are pure functions of the hero and item lists. Callers that
hand over the same list objects again get the previous result back; new list
objects (e.g. after a refetch) trigger a rebuild. Only the latest result is
kept.
"""

import functools
import threading
from typing import Any, Callable, Optional, Tuple, TypeVar

from .ability_metrics import build_hero_ability_rows
from .hero_growth import build_growth_profiles, build_hero_growth_rows


R = TypeVar("R")


def memoize_by_identity(func: Callable[..., R]) -> Callable[..., R]:
    """Cache the last result of ``func`` keyed on the identity of its positional args."""
    lock = threading.Lock()
    # (args kept alive so their ids stay unique, result)
    last: list = [None]

    @functools.wraps(func)
    def wrapper(*args: Any) -> R:
        with lock:
            cached: Optional[Tuple[tuple, R]] = last[0]
            if cached is not None:
                cached_args, result = cached
                if len(cached_args) == len(args) and all(a is b for a, b in zip(cached_args, args)):
                    return result
        result = func(*args)
        with lock:
            last[0] = (args, result)
        return result

    def cache_clear() -> None:
        with lock:
            last[0] = None

    wrapper.cache_clear = cache_clear
    return wrapper


memoized_growth_rows = memoize_by_identity(build_hero_growth_rows)
memoized_ability_rows = memoize_by_identity(build_hero_ability_rows)
memoized_growth_profiles = memoize_by_identity(build_growth_profiles)
