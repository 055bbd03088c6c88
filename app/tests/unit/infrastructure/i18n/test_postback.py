"""Tests for infrastructure.i18n.postback module."""

import pytest

from infrastructure.i18n.postback import AsyncPostbackParser, PostbackSection

FRAGMENT = "5|updatePanel|p1|Hello|4|pageTitle||Tiny|2|hiddenField|h|ab|"


class TestAsyncPostbackParser:
    """Tests for AsyncPostbackParser."""

    def test_parses_sections(self):
        parser = AsyncPostbackParser(FRAGMENT)
        assert parser.sections == [
            PostbackSection(type="updatePanel", id="p1", content="Hello"),
            PostbackSection(type="pageTitle", id="", content="Tiny"),
            PostbackSection(type="hiddenField", id="h", content="ab"),
        ]

    def test_serializes_unchanged_fragment(self):
        assert str(AsyncPostbackParser(FRAGMENT)) == FRAGMENT

    def test_content_may_contain_separator(self):
        fragment = "3|scriptBlock|s|a|b|"
        assert AsyncPostbackParser(fragment).sections[0].content == "a|b"

    def test_edited_section_length_recomputed(self):
        parser = AsyncPostbackParser(FRAGMENT)
        parser.get_sections("updatePanel")[0].content = "Bonjour!"
        assert str(parser) == "8|updatePanel|p1|Bonjour!|4|pageTitle||Tiny|2|hiddenField|h|ab|"

    def test_get_sections_by_type(self):
        parser = AsyncPostbackParser("1|a|x|1|1|b|y|2|1|a|z|3|")
        assert [section.id for section in parser.get_sections("a")] == ["x", "z"]
        assert parser.get_sections("missing") == []

    def test_empty_fragment(self):
        parser = AsyncPostbackParser("")
        assert parser.sections == []
        assert str(parser) == ""

    @pytest.mark.parametrize(
        "fragment",
        [
            "abc|updatePanel|p1|Hello|",
            "9|updatePanel|p1|Hello|",
            "5|updatePanel|p1|HelloX",
            "5|updatePanel",
        ],
    )
    def test_malformed_fragment(self, fragment):
        with pytest.raises(ValueError):
            AsyncPostbackParser(fragment)
