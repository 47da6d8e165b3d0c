"""
Tests for localized fields and the article status machine.
"""

import pytest

from core.domain.content import ArticleStatus, can_disable, can_transition
from core.domain.localization import (
    get_localized_content,
    has_required_language,
    parse_localized,
    restrict_languages,
)


class TestGetLocalizedContent:
    def test_requested_language(self):
        assert get_localized_content({"en": "Goal", "am": "ጎል"}, "am") == "ጎል"

    def test_falls_back_to_english(self):
        assert get_localized_content({"en": "Goal"}, "om") == "Goal"

    def test_empty_translation_falls_back(self):
        assert get_localized_content({"en": "Goal", "am": ""}, "am") == "Goal"

    def test_missing_field(self):
        assert get_localized_content(None, "en") == ""
        assert get_localized_content({}, "am") == ""


class TestParseLocalized:
    def test_mapping(self):
        assert parse_localized({"en": "Goal", "am": " "}) == {"en": "Goal"}

    def test_json_string(self):
        assert parse_localized('{"en": "Goal", "om": "Galchii"}') == {"en": "Goal", "om": "Galchii"}

    def test_bare_string_is_english(self):
        assert parse_localized("Full time") == {"en": "Full time"}

    def test_json_string_literal(self):
        assert parse_localized('"Full time"') == {"en": "Full time"}

    def test_empty(self):
        assert parse_localized(None) == {}
        assert parse_localized("  ") == {}

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            parse_localized(42)


def test_has_required_language():
    assert has_required_language({"en": "Goal"}) is True
    assert has_required_language({"am": "ጎል"}) is False
    assert has_required_language({"en": "  "}) is False


def test_restrict_languages():
    assert restrict_languages({"en": "a", "fr": "b", "am": "c"}, ["en", "am"]) == {"en": "a", "am": "c"}


class TestStatusMachine:
    @pytest.mark.parametrize(
        "current, target",
        [
            (ArticleStatus.PENDING, ArticleStatus.APPROVED),
            (ArticleStatus.PENDING, ArticleStatus.REJECTED),
            (ArticleStatus.PENDING, ArticleStatus.DISABLED),
            (ArticleStatus.APPROVED, ArticleStatus.DISABLED),
            (ArticleStatus.REJECTED, ArticleStatus.DISABLED),
            (ArticleStatus.APPROVED, ArticleStatus.APPROVED),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target) is True

    @pytest.mark.parametrize(
        "current, target",
        [
            (ArticleStatus.APPROVED, ArticleStatus.REJECTED),
            (ArticleStatus.REJECTED, ArticleStatus.APPROVED),
            (ArticleStatus.DISABLED, ArticleStatus.APPROVED),
            (ArticleStatus.APPROVED, ArticleStatus.PENDING),
        ],
    )
    def test_refused(self, current, target):
        assert can_transition(current, target) is False

    def test_disable(self):
        assert can_disable(ArticleStatus.PENDING) is True
        assert can_disable(ArticleStatus.REJECTED) is True
        assert can_disable(ArticleStatus.DISABLED) is False
