"""Reusable multilingual text asset — the template every placement inherits from.

Tier layout, lowest priority first:

    default_settings / default_text / default_context   common defaults
    default_language_override / default_text_override   per-language asset overrides

Override maps are ``None`` when empty; the validators below normalise
documents on load so that an empty entry or ``{}`` never survives.
"""
from pydantic import BaseModel, Field, field_validator

from models.language_settings import CommonSettings, LanguageSettings
from utils.override_maps import normalize_settings_map, normalize_text_map


class TextAsset(BaseModel):
    id: str
    name: str = Field(min_length=1)
    default_text: str = ""
    default_context: str = ""
    default_settings: CommonSettings = Field(default_factory=CommonSettings)
    default_text_override: dict[str, str | None] | None = None
    default_language_override: dict[str, LanguageSettings] | None = None

    @field_validator("default_text_override")
    @classmethod
    def drop_empty_text_overrides(cls, v: dict[str, str | None] | None) -> dict[str, str] | None:
        return normalize_text_map(v)

    @field_validator("default_language_override")
    @classmethod
    def drop_empty_language_overrides(
        cls, v: dict[str, LanguageSettings] | None
    ) -> dict[str, LanguageSettings] | None:
        return normalize_settings_map(v)

    def override_languages(self) -> set[str]:
        """Languages with any asset-level override (settings or text)."""
        return set(self.default_language_override or {}) | set(self.default_text_override or {})
