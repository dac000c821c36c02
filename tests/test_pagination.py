"""
Unit tests for pagination windows and the component manifest table
"""

import pytest

from gamehub_proxy.domain.manifests import TYPE_TO_MANIFEST, manifest_path
from gamehub_proxy.domain.pagination import PaginationWindow, window_from

ITEMS = ["a", "b", "c", "d", "e", "f", "g"]


class TestPaginationWindow:
    def test_bounds_are_half_open(self):
        w = PaginationWindow(page=2, page_size=3)
        assert (w.start, w.end) == (3, 6)

    @pytest.mark.parametrize(
        "page,expected",
        [(1, ["a", "b", "c"]), (2, ["d", "e", "f"]), (3, ["g"]), (4, []), (50, [])],
    )
    def test_seven_items_by_three(self, page, expected):
        assert PaginationWindow(page=page, page_size=3).slice(ITEMS) == expected

    def test_pages_below_one_select_nothing(self):
        assert PaginationWindow(page=0, page_size=3).slice(ITEMS) == []
        assert PaginationWindow(page=-1, page_size=3).slice(ITEMS) == []

    def test_slice_returns_new_list(self):
        items = list(ITEMS)
        page = PaginationWindow(page=1, page_size=10).slice(items)
        page.append("z")
        assert items == ITEMS


class TestWindowFrom:
    def test_defaults(self):
        assert window_from(None, None, default_size=30) == PaginationWindow(1, 30)

    def test_zero_treated_as_missing(self):
        assert window_from(0, 0, default_size=4) == PaginationWindow(1, 4)

    def test_explicit(self):
        assert window_from(3, 5, default_size=4) == PaginationWindow(3, 5)


class TestManifestPath:
    def test_all_types_mapped(self):
        assert sorted(TYPE_TO_MANIFEST) == [1, 2, 3, 4, 5, 6, 7]
        assert manifest_path(3) == "/components/dxvk_manifest"

    def test_numeric_string(self):
        assert manifest_path("7") == "/components/steam_manifest"

    @pytest.mark.parametrize("value", [None, 0, 8, "x", True, 1.5])
    def test_unknown(self, value):
        assert manifest_path(value) is None
