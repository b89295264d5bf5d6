"""Tests for the reference link catalogue."""

from __future__ import annotations

import pytest

from gf2t.core.models import LinkCategory
from gf2t.education import CATEGORIES, REFERENCE_LINKS, get_links_by_category


def test_every_category_has_links():
    for category in CATEGORIES:
        assert get_links_by_category(category)


def test_accepts_string_value():
    assert get_links_by_category("git-flow") == get_links_by_category(LinkCategory.GIT_FLOW)


def test_unknown_category_raises():
    with pytest.raises(ValueError):
        get_links_by_category("astrology")


def test_links_are_https_and_unique():
    urls = [link.url for link in REFERENCE_LINKS]
    assert all(url.startswith("https://") for url in urls)
    assert len(urls) == len(set(urls))
