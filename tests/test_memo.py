"""Tests for identity-keyed memoization."""

from src.core.memo import memoize_by_identity, memoized_growth_rows
from src.data.models import Hero


class TestMemoizeByIdentity:
    """Tests for the single-entry identity cache."""

    def create_counter(self):
        calls = []

        @memoize_by_identity
        def build(heroes, items):
            calls.append((heroes, items))
            return [len(heroes), len(items)]

        return build, calls

    def test_same_objects_hit(self):
        build, calls = self.create_counter()
        heroes, items = [1], []
        first = build(heroes, items)
        assert build(heroes, items) is first
        assert len(calls) == 1

    def test_equal_but_new_objects_rebuild(self):
        build, calls = self.create_counter()
        build([1], [])
        build([1], [])
        assert len(calls) == 2

    def test_only_latest_kept(self):
        build, calls = self.create_counter()
        a, b, items = [1], [2], []
        build(a, items)
        build(b, items)
        build(a, items)
        assert len(calls) == 3

    def test_cache_clear(self):
        build, calls = self.create_counter()
        heroes, items = [1], []
        build(heroes, items)
        build.cache_clear()
        build(heroes, items)
        assert len(calls) == 2

    def test_row_builder_reuses_rows(self):
        heroes = [Hero.model_validate({"id": 1, "name": "Haze"})]
        items = []
        assert memoized_growth_rows(heroes, items) is memoized_growth_rows(heroes, items)
