"""Placement of a TextAsset on one page.

`multilingual_text` and `override_language_settings` are per language;
`override_context` is a single note shared by all languages. Same
absent-vs-empty rules as the asset maps.
"""
from pydantic import BaseModel, field_validator

from models.language_settings import LanguageSettings
from utils.override_maps import is_empty_value, normalize_settings_map, normalize_text_map


class TextAssetInstance(BaseModel):
    id: str
    asset_id: str
    multilingual_text: dict[str, str | None] | None = None
    override_context: str | None = None
    override_language_settings: dict[str, LanguageSettings] | None = None

    @field_validator("multilingual_text")
    @classmethod
    def drop_empty_texts(cls, v: dict[str, str | None] | None) -> dict[str, str] | None:
        return normalize_text_map(v)

    @field_validator("override_context")
    @classmethod
    def empty_context_is_absent(cls, v: str | None) -> str | None:
        return None if is_empty_value(v) else v

    @field_validator("override_language_settings")
    @classmethod
    def drop_empty_language_settings(
        cls, v: dict[str, LanguageSettings] | None
    ) -> dict[str, LanguageSettings] | None:
        return normalize_settings_map(v)

    def has_overrides(self) -> bool:
        return bool(self.multilingual_text or self.override_context or self.override_language_settings)
