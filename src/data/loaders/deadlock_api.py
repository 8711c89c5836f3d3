"""Hero and item loader backed by the Deadlock asset API."""

import logging
from typing import Any, Callable, List, Optional, TypeVar

import requests
from pydantic import ValidationError

from ..models.hero import Hero
from ..models.item import AnyItem, parse_item


logger = logging.getLogger(__name__)

DEADLOCK_API_BASE = "https://assets.deadlock-api.com"
HEROES_PATH = "/v2/heroes"
ITEMS_PATH = "/v2/items"
DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")


class DeadlockApiError(RuntimeError):
    """Raised when the asset API cannot be read."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def fetch_json(
    path: str,
    base_url: str = DEADLOCK_API_BASE,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Any:
    """GET a JSON document from the asset API.

    Args:
        path: Path below the base URL, e.g. ``/v2/heroes``.
        base_url: API root.
        timeout: Request timeout in seconds.
        session: Optional session to reuse connections.

    Returns:
        Decoded JSON body.

    Raises:
        DeadlockApiError: On network failure or a non-2xx response.
    """
    url = f"{base_url.rstrip('/')}{path}"
    http = session or requests
    try:
        response = http.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Deadlock API request to %s failed: %s", url, exc)
        raise DeadlockApiError(f"Deadlock API request failed: {exc}") from exc

    if not response.ok:
        message = response.text
        logger.error("Deadlock API returned %s for %s", response.status_code, url)
        raise DeadlockApiError(
            f"Deadlock API request failed ({response.status_code} {response.reason}): {message}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise DeadlockApiError(f"Deadlock API returned invalid JSON for {path}") from exc


def _parse_records(records: Any, parser: Callable[[Any], T], label: str) -> List[T]:
    """Validate every record, skipping the ones that do not fit the model."""
    if not isinstance(records, list):
        raise DeadlockApiError(f"Deadlock API returned a non-list payload for {label}")

    parsed = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping %s record %d: not an object", label, index)
            continue
        try:
            parsed.append(parser(record))
        except ValidationError as exc:
            logger.warning(
                "Skipping %s record %s: %d validation errors",
                label,
                record.get("class_name", index),
                exc.error_count(),
            )
    return parsed


def fetch_heroes(
    base_url: str = DEADLOCK_API_BASE,
    path: str = HEROES_PATH,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> List[Hero]:
    """Load all hero definitions.

    Returns:
        List of Hero objects.
    """
    payload = fetch_json(path, base_url=base_url, timeout=timeout, session=session)
    heroes = _parse_records(payload, Hero.model_validate, "hero")
    logger.info("Fetched %d heroes", len(heroes))
    return heroes


def fetch_items(
    base_url: str = DEADLOCK_API_BASE,
    path: str = ITEMS_PATH,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> List[AnyItem]:
    """Load all item definitions (weapons, abilities, shop items).

    Returns:
        List of item objects, one variant model per record.
    """
    payload = fetch_json(path, base_url=base_url, timeout=timeout, session=session)
    items = _parse_records(payload, parse_item, "item")
    logger.info("Fetched %d items", len(items))
    return items
