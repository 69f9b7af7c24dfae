"""Tests for the per-language override map helpers."""
import pytest
from pydantic import ValidationError

from models.language_settings import LanguageSettings
from utils.override_maps import (
    drop_language,
    is_empty_value,
    normalize_settings_map,
    normalize_text_map,
    update_settings_map,
    update_text_map,
)


class TestIsEmptyValue:
    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert is_empty_value(value)

    @pytest.mark.parametrize("value", [0, 0.0, False, " ", "#000000"])
    def test_not_empty(self, value):
        assert not is_empty_value(value)


class TestNormalize:
    def test_none_and_empty_become_none(self):
        assert normalize_settings_map(None) is None
        assert normalize_settings_map({}) is None
        assert normalize_text_map({}) is None

    def test_drops_empty_entries(self):
        assert normalize_settings_map({"ja": LanguageSettings(), "en": LanguageSettings(pos_x=1)}) \
            == {"en": LanguageSettings(pos_x=1)}
        assert normalize_text_map({"ja": "", "en": "Hi", "de": None}) == {"en": "Hi"}


class TestUpdateSettingsMap:
    def test_creates_map_and_entry(self):
        result = update_settings_map(None, "en", {"pos_x": 10})
        assert result == {"en": LanguageSettings(pos_x=10)}

    def test_merges_into_existing_entry(self):
        current = {"en": LanguageSettings(pos_x=10)}
        result = update_settings_map(current, "en", {"pos_y": 20})
        assert result == {"en": LanguageSettings(pos_x=10, pos_y=20)}

    def test_does_not_mutate_input(self):
        current = {"en": LanguageSettings(pos_x=10)}
        update_settings_map(current, "en", {"pos_x": None})
        assert current == {"en": LanguageSettings(pos_x=10)}

    def test_clearing_last_field_removes_language_and_map(self):
        current = {"en": LanguageSettings(pos_x=10)}
        assert update_settings_map(current, "en", {"pos_x": None}) is None

    def test_clearing_keeps_sibling_languages(self):
        current = {"en": LanguageSettings(pos_x=10), "ja": LanguageSettings(pos_x=5)}
        assert update_settings_map(current, "en", {"pos_x": ""}) == {"ja": LanguageSettings(pos_x=5)}

    def test_zero_is_stored(self):
        assert update_settings_map(None, "en", {"z_index": 0}) == {"en": LanguageSettings(z_index=0)}

    def test_invalid_value_raises(self):
        with pytest.raises(ValidationError):
            update_settings_map(None, "en", {"font_size": "huge"})


class TestUpdateTextMap:
    def test_set_and_clear(self):
        result = update_text_map(None, "en", "Hello")
        assert result == {"en": "Hello"}
        assert update_text_map(result, "en", "") is None

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            update_text_map(None, "en", 12)


def test_drop_language():
    current = {"en": LanguageSettings(pos_x=10), "ja": LanguageSettings(pos_x=5)}
    assert drop_language(current, "en") == {"ja": LanguageSettings(pos_x=5)}
    assert drop_language({"en": LanguageSettings(pos_x=10)}, "en") is None
    assert drop_language(None, "en") is None
