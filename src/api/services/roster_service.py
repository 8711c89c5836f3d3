"""
Hero and item roster service.
"""

import logging
import threading
import time
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from src.core.ability_metrics import AbilityTag, HeroAbilityRow
from src.core.hero_growth import HeroGrowthProfile, HeroGrowthRow
from src.core.memo import memoized_ability_rows, memoized_growth_profiles, memoized_growth_rows
from src.data.loaders import DeadlockApiError, fetch_heroes, fetch_items
from src.data.models import AnyItem, Hero

from ..config import settings


logger = logging.getLogger(__name__)


class RosterService:
    """Fetched heroes and items plus the rows derived from them.

    The fetched arrays are reused for ``revalidate_seconds``. A failed
    refetch keeps serving the previous arrays; a failed first fetch raises.
    """

    def __init__(
        self,
        base_url: str = settings.DEADLOCK_API_BASE,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
        revalidate_seconds: float = settings.API_REVALIDATE_SECONDS,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.revalidate_seconds = revalidate_seconds
        self.session = session
        self._clock = clock
        self._lock = threading.Lock()
        self._heroes: Optional[List[Hero]] = None
        self._items: Optional[List[AnyItem]] = None
        self._fetched_at: Optional[float] = None

    def _is_fresh(self, now: float) -> bool:
        return self._fetched_at is not None and now - self._fetched_at < self.revalidate_seconds

    def load(self) -> Tuple[List[Hero], List[AnyItem]]:
        """
        Current hero and item arrays, refetched when stale.

        Raises:
            DeadlockApiError: The first fetch failed.
        """
        with self._lock:
            now = self._clock()
            if self._heroes is not None and self._is_fresh(now):
                return self._heroes, self._items

            try:
                heroes = fetch_heroes(
                    base_url=self.base_url,
                    path=settings.HEROES_PATH,
                    timeout=self.timeout,
                    session=self.session,
                )
                items = fetch_items(
                    base_url=self.base_url,
                    path=settings.ITEMS_PATH,
                    timeout=self.timeout,
                    session=self.session,
                )
            except DeadlockApiError:
                if self._heroes is None:
                    raise
                logger.warning("Roster refetch failed, serving data fetched %.0fs ago", now - self._fetched_at)
                return self._heroes, self._items

            self._heroes, self._items, self._fetched_at = heroes, items, now
            return heroes, items

    def invalidate(self) -> None:
        """Force a refetch on the next access."""
        with self._lock:
            self._fetched_at = None

    # === Derived rows ===

    def growth_rows(self) -> List[HeroGrowthRow]:
        heroes, items = self.load()
        return memoized_growth_rows(heroes, items)

    def ability_rows(
        self,
        tag: Optional[AbilityTag] = None,
        include_disabled: bool = True,
    ) -> List[HeroAbilityRow]:
        """Ability rows, optionally limited to one tag and to enabled heroes."""
        heroes, items = self.load()
        rows = memoized_ability_rows(heroes, items)
        if tag is not None:
            rows = [row for row in rows if tag in row.tags]
        if not include_disabled:
            rows = [row for row in rows if not row.is_disabled]
        return rows

    def growth_profiles(self) -> List[HeroGrowthProfile]:
        heroes, items = self.load()
        return memoized_growth_profiles(heroes, items)

    # === Serialization ===

    def growth_table(self, include_disabled: bool = True) -> List[Dict[str, Any]]:
        """Growth rows as plain dicts."""
        rows = self.growth_rows()
        if not include_disabled:
            rows = [row for row in rows if not row.is_disabled]
        return [asdict(row) for row in rows]

    def ability_table(
        self,
        tag: Optional[AbilityTag] = None,
        include_disabled: bool = True,
    ) -> List[Dict[str, Any]]:
        """Ability rows as plain dicts."""
        return [asdict(row) for row in self.ability_rows(tag=tag, include_disabled=include_disabled)]
