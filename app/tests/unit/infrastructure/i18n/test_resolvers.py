"""Tests for infrastructure.i18n.resolvers module."""

import pytest

from infrastructure.i18n import LanguageNegotiator, LanguageTag, UserLanguageResolver
from infrastructure.i18n.resolvers import COOKIE_LANGUAGE_QUALITY
from tests.factories.i18n import make_language_items


def _tags(*langtags):
    return [LanguageTag.get_cached_instance(langtag) for langtag in langtags]


class TestUserLanguageResolver:
    """Tests for UserLanguageResolver."""

    @pytest.fixture
    def resolver(self):
        return UserLanguageResolver(cookie_name="i18n.langtag")

    @pytest.mark.unit
    def test_parse_accept_language_orders_by_quality(self, resolver):
        """Items are sorted by descending quality."""
        items = resolver.parse_accept_language("en;q=0.5,fr-CA,fr;q=0.9")
        assert [str(item.language_tag) for item in items] == ["fr-CA", "fr", "en"]
        assert [item.quality for item in items] == [1.0, 0.9, 0.5]

    @pytest.mark.unit
    def test_parse_accept_language_keeps_header_order_on_ties(self, resolver):
        items = resolver.parse_accept_language("de,fr,en")
        assert [str(item.language_tag) for item in items] == ["de", "fr", "en"]

    @pytest.mark.unit
    def test_parse_accept_language_drops_unusable_entries(self, resolver):
        """Wildcards, invalid tags and q=0 entries are dropped."""
        items = resolver.parse_accept_language("*,not-a-valid-tag,fr;q=0,de")
        assert [str(item.language_tag) for item in items] == ["de"]

    @pytest.mark.unit
    def test_parse_accept_language_malformed_quality(self, resolver):
        """A malformed quality value counts as 1.0."""
        items = resolver.parse_accept_language("fr;q=abc")
        assert items[0].quality == 1.0

    @pytest.mark.unit
    @pytest.mark.parametrize("header", [None, ""])
    def test_parse_accept_language_empty(self, resolver, header):
        assert resolver.parse_accept_language(header) == []

    @pytest.mark.unit
    def test_resolve_puts_cookie_first(self, resolver):
        """A valid cookie language precedes every header language."""
        items = resolver.resolve("fr,en;q=0.8", cookie_value="de")
        assert str(items[0].language_tag) == "de"
        assert items[0].quality == COOKIE_LANGUAGE_QUALITY
        assert [str(item.language_tag) for item in items[1:]] == ["fr", "en"]

    @pytest.mark.unit
    def test_resolve_ignores_invalid_cookie(self, resolver):
        items = resolver.resolve("fr", cookie_value="??")
        assert [str(item.language_tag) for item in items] == ["fr"]


class TestLanguageNegotiator:
    """Tests for LanguageNegotiator.match_lists."""

    @pytest.mark.unit
    def test_exact_match_wins_over_earlier_looser_match(self):
        """Stricter passes run first across every user language."""
        user = make_language_items("fr", "de-DE")
        langtag, _ = LanguageNegotiator.match_lists(user, _tags("fr-CA", "de-DE"), None, None)
        assert str(langtag) == "de-DE"

    @pytest.mark.unit
    def test_default_region_match(self):
        user = make_language_items("fr-CA")
        langtag, _ = LanguageNegotiator.match_lists(user, _tags("de", "fr"), None, None)
        assert str(langtag) == "fr"

    @pytest.mark.unit
    def test_max_grade_limits_passes(self):
        """No match is returned beyond the grade ceiling."""
        user = make_language_items("zh-Hant-HK")
        app = _tags("zh-Hans-CN")
        assert LanguageNegotiator.match_lists(user, app, None, None, max_grade=2) == (None, None)
        langtag, _ = LanguageNegotiator.match_lists(user, app, None, None, max_grade=3)
        assert str(langtag) == "zh-Hans-CN"

    @pytest.mark.unit
    def test_negative_max_grade_means_all_passes(self):
        user = make_language_items("zh-Hant-HK")
        langtag, _ = LanguageNegotiator.match_lists(user, _tags("zh-Hans-CN"), None, None, max_grade=-1)
        assert str(langtag) == "zh-Hans-CN"

    @pytest.mark.unit
    def test_lookup_miss_continues_search(self):
        """A language whose lookup returns None is skipped."""
        user = make_language_items("fr", "de")
        texts = {"de": "Willkommen"}

        def lookup(langtag, key):
            return texts.get(str(langtag))

        langtag, text = LanguageNegotiator.match_lists(user, _tags("fr", "de"), "Welcome", lookup)
        assert str(langtag) == "de"
        assert text == "Willkommen"

    @pytest.mark.unit
    def test_no_match(self):
        user = make_language_items("ja")
        assert LanguageNegotiator.match_lists(user, _tags("fr", "de"), None, None) == (None, None)
