"""Tests for roster fetching and revalidation."""

from unittest.mock import patch

import pytest

from src.api.services import RosterService
from src.data.loaders import DeadlockApiError
from src.data.models import Hero


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(clock):
    return RosterService(base_url="https://example.test", revalidate_seconds=60, clock=clock)


def create_heroes(*names):
    return [Hero.model_validate({"id": index + 1, "name": name}) for index, name in enumerate(names)]


@patch("src.api.services.roster_service.fetch_items")
@patch("src.api.services.roster_service.fetch_heroes")
class TestRosterService:
    """Tests for the revalidation window."""

    def test_reuses_within_window(self, mock_heroes, mock_items, service, clock):
        mock_heroes.return_value = create_heroes("Haze")
        mock_items.return_value = []
        service.load()
        clock.now = 59
        service.load()
        assert mock_heroes.call_count == 1

    def test_refetches_after_window(self, mock_heroes, mock_items, service, clock):
        mock_heroes.side_effect = [create_heroes("Haze"), create_heroes("Haze", "Seven")]
        mock_items.return_value = []
        service.load()
        clock.now = 61
        heroes, _ = service.load()
        assert [hero.name for hero in heroes] == ["Haze", "Seven"]

    def test_stale_data_on_refetch_failure(self, mock_heroes, mock_items, service, clock):
        mock_heroes.side_effect = [create_heroes("Haze"), DeadlockApiError("down")]
        mock_items.return_value = []
        service.load()
        clock.now = 120
        heroes, _ = service.load()
        assert [hero.name for hero in heroes] == ["Haze"]

    def test_first_failure_raises(self, mock_heroes, mock_items, service):
        mock_heroes.side_effect = DeadlockApiError("down")
        with pytest.raises(DeadlockApiError):
            service.load()

    def test_invalidate(self, mock_heroes, mock_items, service):
        mock_heroes.return_value = create_heroes("Haze")
        mock_items.return_value = []
        service.load()
        service.invalidate()
        service.load()
        assert mock_heroes.call_count == 2

    def test_passes_connection_settings(self, mock_heroes, mock_items, service):
        mock_heroes.return_value = []
        mock_items.return_value = []
        service.load()
        kwargs = mock_heroes.call_args.kwargs
        assert kwargs["base_url"] == "https://example.test"

    def test_tables_filter_disabled(self, mock_heroes, mock_items, service):
        mock_heroes.return_value = [
            Hero.model_validate({"id": 1, "name": "Haze"}),
            Hero.model_validate({"id": 2, "name": "Wip", "disabled": True}),
        ]
        mock_items.return_value = []
        assert len(service.growth_table()) == 2
        assert [row["hero_name"] for row in service.growth_table(include_disabled=False)] == ["Haze"]
