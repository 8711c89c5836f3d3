"""
Page-view counter service.
"""

import logging
from numbers import Number
from typing import Optional

import requests

from ..config import settings


logger = logging.getLogger(__name__)


class CounterApiError(RuntimeError):
    """Raised when the counter service cannot be reached or answers non-2xx."""


class PageViewService:
    """Thin pass-through to the hosted page-view counter."""

    def __init__(
        self,
        base_url: str = settings.COUNTER_API_BASE,
        namespace: str = settings.COUNTERAPI_NAMESPACE,
        counter: str = settings.COUNTERAPI_COUNTER,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url
        self.namespace = namespace
        self.counter = counter
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.namespace}/{self.counter}/up"

    def increment(self) -> Optional[int]:
        """
        Bump the counter and return its new value.

        Returns:
            The counter's ``count`` (or ``value``), None when neither is numeric.

        Raises:
            CounterApiError: Network failure or non-2xx response.
        """
        try:
            response = requests.get(self.url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Failed to update page views: %s", exc)
            raise CounterApiError(f"Counter request failed: {exc}") from exc

        if not response.ok:
            logger.error("Failed to update page views: %s %s", response.status_code, response.reason)
            raise CounterApiError(f"CounterAPI request failed with status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Failed to update page views: invalid JSON")
            raise CounterApiError("CounterAPI returned invalid JSON") from exc

        for key in ("count", "value"):
            value = payload.get(key) if isinstance(payload, dict) else None
            if isinstance(value, Number) and not isinstance(value, bool):
                return int(value)
        return None
